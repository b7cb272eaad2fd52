"""Fixed catalog of API key plans. Prices are in cents."""

from .models import Product

DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="google",
        name="Google API Key",
        description="High‑quota access for Google services and analytics.",
        price=9900,
        requests_per_month=250000,
        rate_limit="2,000 requests/minute",
        features=(
            "Search, Maps & Analytics ready",
            "Priority dashboard & usage insights",
            "Production‑grade rate limits",
        ),
        popular=True,
    ),
    Product(
        id="tiktok",
        name="TikTok API Key",
        description="Creator and campaign analytics for TikTok.",
        price=6900,
        requests_per_month=150000,
        rate_limit="1,000 requests/minute",
        features=(
            "Audience & engagement metrics",
            "Hashtag and trend lookups",
            "Campaign reporting endpoints",
        ),
        popular=True,
    ),
    Product(
        id="youtube",
        name="YouTube API Key",
        description="Channel, video, and live analytics at scale.",
        price=7900,
        requests_per_month=200000,
        rate_limit="1,500 requests/minute",
        features=(
            "Channel & playlist insights",
            "Real‑time performance metrics",
            "Comment & engagement data",
        ),
        popular=True,
    ),
    Product(
        id="facebook",
        name="Facebook API Key",
        description="Graph API access for pages, ads, and insights.",
        price=8900,
        requests_per_month=220000,
        rate_limit="1,500 requests/minute",
        features=(
            "Page & post analytics",
            "Ads performance metrics",
            "Audience demographics",
        ),
        popular=True,
    ),
    Product(
        id="instagram",
        name="Instagram API Key",
        description="Insights for creators, stories, and reels.",
        price=7400,
        requests_per_month=180000,
        rate_limit="1,200 requests/minute",
        features=(
            "Profile & media analytics",
            "Stories and reels insights",
            "Hashtag discovery data",
        ),
        popular=True,
    ),
    Product(
        id="twitter",
        name="Twitter/X API Key",
        description="Real‑time stream and historical tweet analytics.",
        price=8400,
        requests_per_month=200000,
        rate_limit="2,000 requests/minute",
        features=(
            "Search & filtered streams",
            "User & timeline lookups",
            "Engagement and reach metrics",
        ),
        popular=True,
    ),
    Product(
        id="whatsapp",
        name="WhatsApp Business API Key",
        description="Two‑way messaging and notifications via WhatsApp.",
        price=7800,
        requests_per_month=150000,
        rate_limit="1,000 messages/minute",
        features=(
            "Session and template messages",
            "Delivery & read receipt tracking",
            "Rich media attachments",
        ),
    ),
    Product(
        id="telegram",
        name="Telegram Bot API Key",
        description="Global chat automation with Telegram bots.",
        price=4900,
        requests_per_month=120000,
        rate_limit="900 requests/minute",
        features=(
            "Bot webhooks & polling",
            "Inline queries and commands",
            "Groups and channel automation",
        ),
    ),
    Product(
        id="discord",
        name="Discord API Key",
        description="Bots, moderation, and community automation on Discord.",
        price=5200,
        requests_per_month=140000,
        rate_limit="1,000 requests/minute",
        features=(
            "Guild & member management",
            "Slash commands and interactions",
            "Rich embeds and webhooks",
        ),
    ),
    Product(
        id="slack",
        name="Slack API Key",
        description="Workflow and notification integrations for Slack.",
        price=6100,
        requests_per_month=130000,
        rate_limit="900 requests/minute",
        features=(
            "Events API & webhooks",
            "Slash commands and bots",
            "Workflow automation hooks",
        ),
    ),
    Product(
        id="line",
        name="LINE Messaging API Key",
        description="Messaging automation for LINE users in Asia.",
        price=5600,
        requests_per_month=120000,
        rate_limit="800 requests/minute",
        features=(
            "Push & reply messages",
            "Rich menu customization",
            "Webhook‑based events",
        ),
    ),
    Product(
        id="wechat",
        name="WeChat Official Account API Key",
        description="Messaging and mini‑program integrations on WeChat.",
        price=9200,
        requests_per_month=220000,
        rate_limit="1,500 requests/minute",
        features=(
            "Official account messaging",
            "QR code and menu flows",
            "Mini‑program integrations",
        ),
    ),
    Product(
        id="github",
        name="GitHub API Key",
        description="Automation and analytics for GitHub repositories.",
        price=6800,
        requests_per_month=160000,
        rate_limit="1,000 requests/minute",
        features=(
            "Repo & PR analytics",
            "Actions and CI insights",
            "Webhooks and automation",
        ),
    ),
    Product(
        id="shopify",
        name="Shopify API Key",
        description="Storefront, orders, and inventory access for Shopify.",
        price=9900,
        requests_per_month=180000,
        rate_limit="1,200 requests/minute",
        features=(
            "Orders & customer data",
            "Inventory and catalog sync",
            "Webhook‑driven automations",
        ),
    ),
    Product(
        id="stripe",
        name="Stripe API Key",
        description="Global payments and billing integration with Stripe.",
        price=8800,
        requests_per_month=200000,
        rate_limit="1,500 requests/minute",
        features=(
            "Payments and subscriptions",
            "Invoicing and payouts",
            "Radar & fraud insights",
        ),
    ),
    Product(
        id="openai",
        name="OpenAI API Key",
        description="Access to GPT‑style models and embeddings.",
        price=11900,
        requests_per_month=300000,
        rate_limit="2,500 tokens/second",
        features=(
            "Chat completion endpoints",
            "Embeddings and vector search",
            "Moderation tools",
        ),
    ),
    Product(
        id="google-maps",
        name="Google Maps API Key",
        description="Geocoding, routing, and map tiles for global apps.",
        price=8700,
        requests_per_month=210000,
        rate_limit="1,800 requests/minute",
        features=(
            "Geocoding & directions",
            "Place search & details",
            "Static & dynamic maps",
        ),
    ),
    Product(
        id="twilio",
        name="Twilio API Key",
        description="SMS, voice, and WhatsApp communications via Twilio.",
        price=8300,
        requests_per_month=190000,
        rate_limit="1,400 requests/minute",
        features=(
            "Programmable SMS & voice",
            "WhatsApp messaging",
            "Verify and auth flows",
        ),
    ),
)
