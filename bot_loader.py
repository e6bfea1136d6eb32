from src.rate_limiter import RpcRateLimiter
from src.utils import load_config


config = load_config()
rate_limiter = RpcRateLimiter(config.rpc_rate_limit_interval)
