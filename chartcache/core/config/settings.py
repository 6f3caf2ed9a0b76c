"""配置管理模块 - 处理chartcache的配置"""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from chartcache.core.exceptions import ConfigurationError
from chartcache.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HOME = Path.home() / ".chartcache"


@dataclass
class StorageConfig:
    """存储配置"""

    backend: str = "duckdb"
    db_path: str = str(DEFAULT_HOME / "charts.duckdb")

    def __post_init__(self) -> None:
        if self.backend not in {"duckdb", "memory"}:
            raise ConfigurationError(
                f"Unsupported storage backend '{self.backend}'",
                {"backend": self.backend, "allowed": ["duckdb", "memory"]},
            )


@dataclass
class ProviderConfig:
    """提供商配置"""

    timeout: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 1.0
    max_backoff: float = 60.0


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class ChartCacheConfig:
    """chartcache主配置"""

    storage: StorageConfig = field(default_factory=StorageConfig)
    providers: ProviderConfig = field(default_factory=ProviderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ChartCacheConfig":
        """从字典创建配置"""
        try:
            return cls(
                storage=StorageConfig(**config_dict.get("storage", {})),
                providers=ProviderConfig(**config_dict.get("providers", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "storage": asdict(self.storage),
            "providers": asdict(self.providers),
            "logging": {k: v for k, v in asdict(self.logging).items() if v is not None},
        }


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否用 ``CHARTCACHE_*`` 环境变量覆盖文件配置
        """
        self.config_path = config_path or DEFAULT_HOME / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> ChartCacheConfig:
        """加载配置"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                # 配置文件有问题时使用默认配置
                logger.warning("failed to load config", path=str(self.config_path), error=str(e))
                config_dict = {}

        if self.use_env:
            config_dict = _deep_update(config_dict, load_config_from_env())
        return ChartCacheConfig.from_dict(config_dict)

    def get_config(self) -> ChartCacheConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = ChartCacheConfig.from_dict(config_dict)

    def save_config(self) -> None:
        """保存配置到文件"""
        import tomli_w

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "wb") as f:
            tomli_w.dump(self.config.to_dict(), f)


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(dict(d.get(k, {})), v)
        else:
            d[k] = v
    return d


def get_default_config() -> ChartCacheConfig:
    """获取默认配置"""
    return ChartCacheConfig()


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    # 存储配置
    storage_config: dict[str, Any] = {}
    if os.getenv("CHARTCACHE_STORAGE_BACKEND"):
        storage_config["backend"] = os.getenv("CHARTCACHE_STORAGE_BACKEND")
    if os.getenv("CHARTCACHE_STORAGE_DB_PATH"):
        storage_config["db_path"] = os.getenv("CHARTCACHE_STORAGE_DB_PATH")
    if storage_config:
        config["storage"] = storage_config

    # 提供商配置
    provider_config: dict[str, Any] = {}
    provider_timeout = os.getenv("CHARTCACHE_PROVIDER_TIMEOUT")
    if provider_timeout is not None:
        provider_config["timeout"] = float(provider_timeout)
    provider_max_retries = os.getenv("CHARTCACHE_PROVIDER_MAX_RETRIES")
    if provider_max_retries is not None:
        provider_config["max_retries"] = int(provider_max_retries)
    if provider_config:
        config["providers"] = provider_config

    # 日志配置
    logging_config: dict[str, Any] = {}
    logging_level = os.getenv("CHARTCACHE_LOGGING_LEVEL")
    if logging_level is not None:
        logging_config["level"] = logging_level
    logging_file = os.getenv("CHARTCACHE_LOGGING_FILE")
    if logging_file is not None:
        logging_config["file"] = logging_file
    if logging_config:
        config["logging"] = logging_config

    return config
