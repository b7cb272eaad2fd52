class Colors:
    SUCCESS = 0x22C55E
    PENDING = 0xFACC15
    ERROR = 0xEF4444
    INFO = 0x3B82F6


# Default receiving wallets shown on the payment page. Override through the
# matching *_WALLET_ADDRESS environment variable.
DEFAULT_WALLET_ADDRESSES = {
    "solana": "3uZL1rwJ9Df7Ah8eMd7tFTLcyPz6rEmrmJ9sLYZksKfZ",
    "bitcoin": "bc1p5v0ym35mxtpmxqa7k6athmj65kwrhjl3nezgtl07zl69x50rulsscygk34",
    "ethereum": "0xCaa09287482B6a0662d824700BF9911ff654bC89",
    "bnb": "0xd76c48c24a1d8baff9101b55f3a792e7647668e3",
    "bep20": "0x32373844928ddCe6991f8f3EcDC4948839B69a9f",
}

PAYMENT_METHOD_LABELS = {
    "paypal": "PayPal",
    "solana": "Solana (SOL)",
    "bitcoin": "Bitcoin (BTC)",
    "ethereum": "Ethereum (ETH)",
    "bnb": "BNB",
    "bep20": "USDT (BEP20)",
    "bank_transfer": "Bank Transfer",
}

FALLBACK_PRODUCT_NAME = "API"
