from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Solana RPC (getTokenAccountsByOwner, getMultipleAccounts, Metaplex PDA reads)
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    rpc_timeout_sec: float = 15.0

    # Token lists (one snapshot per scan)
    jupiter_token_list_url: str = "https://token.jup.ag/all"
    solana_token_list_url: str = (
        "https://raw.githubusercontent.com/solana-labs/token-list/main/src/tokens/solana.tokenlist.json"
    )

    # CoinGecko (free demo key optional)
    coingecko_api_key: str = ""
    coingecko_max_rps: float = 0.5  # paced before the per-source timeout starts

    # DexScreener
    dexscreener_max_rps: float = 4.0

    # Per-source bounded wait; a slow provider degrades to "no data"
    source_timeout_sec: float = 8.0
    token_list_timeout_sec: float = 30.0  # full list download, once per scan

    # Parallel holding resolution within one scan
    max_concurrent_holdings: int = 8

    # Metadata source toggles
    enable_jupiter_list: bool = True
    enable_solana_list: bool = True
    enable_metaplex: bool = True
    enable_coingecko: bool = True
    enable_dexscreener: bool = True

    # Risk thresholds
    min_price_usd: float = 0.0001
    min_liquidity_usd: float = 1000.0
    min_volume_24h_usd: float = 100.0
    max_liquidity_to_mcap_ratio: float = 2.0
    supply_outlier_threshold: float = 1_000_000_000_000.0  # UI units
    bulk_quantity_threshold: float = 100.0  # zero-decimal holdings above this
    hardware_wallet_threshold_usd: float = 1000.0
    dedupe_keyword_issues: bool = False  # one issue per keyword instead of per keyword+field

    # Extra denylisted mints (JSON list or one mint per line), merged with built-ins
    scam_denylist_path: str = ""


settings = Settings()
