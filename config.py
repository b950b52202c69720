import os
from dataclasses import dataclass, replace

# === Discord settings ===
NUMBERS_CHANNEL_ID = int(os.getenv("NUMBERS_CHANNEL_ID", "0"))
TEST_GENERAL_CHANNEL_ID = int(os.getenv("TEST_GENERAL_CHANNEL_ID", "0"))

SCORES_FILE = os.getenv("SCORES_FILE", "scores.json")

# Random draws tried before a round gives up on the current settings
ROUND_ATTEMPTS = int(os.getenv("ROUND_ATTEMPTS", "200"))

# Max lines returned by one !solve reply (0 = no cap)
SOLVE_LINE_LIMIT = int(os.getenv("SOLVE_LINE_LIMIT", "20"))

# === Engine constants ===
MAX_ABS_VAL = 1 << 50
MAX_FACT_ARG = 100
MAX_EXP_SUM = 100
SIMPLIFY_STEPS = 50
MAX_EQUIV_KEY_CACHE = 20000
MEMO_IN_FIND_ALL = True

# Special function indices, in counter order
F_SQRT, F_FACT, F_LG, F_LB, F_LOG = range(5)
F_CNT = 5


@dataclass(frozen=True)
class SearchConfig:
    """
    Everything one solve call reads. Build a new value to change settings;
    a running search never sees a mutation.
    """
    target: int = 24
    max_nest: int = 4
    max_sqrt: int = 2
    max_fact: int = 2
    max_lg: int = 1
    max_lb: int = 2
    max_log: int = 1
    no_negative: bool = True
    only_arithmetic: bool = False
    filter_equivalents: bool = False

    @property
    def max_uses(self) -> tuple:
        return (self.max_sqrt, self.max_fact, self.max_lg, self.max_lb, self.max_log)

    def max_use(self, func: int) -> int:
        return self.max_uses[func]

    def describe(self) -> str:
        return (
            f"target={self.target} nest={self.max_nest} "
            f"sqrt={self.max_sqrt} fact={self.max_fact} lg={self.max_lg} "
            f"lb={self.max_lb} log={self.max_log} "
            f"no_negative={int(self.no_negative)} only_arithmetic={int(self.only_arithmetic)}"
        )


DEFAULT_CONFIG = SearchConfig()


def configure(target, max_nest, max_sqrt, max_fact, max_lg, max_lb, max_log,
              no_neg, only_math) -> SearchConfig:
    """Build a SearchConfig from the nine positional settings used by the shells."""
    return SearchConfig(
        target=int(target),
        max_nest=int(max_nest),
        max_sqrt=int(max_sqrt),
        max_fact=int(max_fact),
        max_lg=int(max_lg),
        max_lb=int(max_lb),
        max_log=int(max_log),
        no_negative=bool(no_neg),
        only_arithmetic=bool(only_math),
    )


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_search_config() -> SearchConfig:
    """Default settings with optional NUMBERS24_* environment overrides."""
    overrides = {}
    for field in ("target", "max_nest", "max_sqrt", "max_fact", "max_lg", "max_lb", "max_log"):
        value = os.getenv(f"NUMBERS24_{field.upper()}")
        if value is not None:
            overrides[field] = int(value)
    overrides["no_negative"] = _env_flag("NUMBERS24_NO_NEGATIVE", DEFAULT_CONFIG.no_negative)
    overrides["only_arithmetic"] = _env_flag("NUMBERS24_ONLY_ARITHMETIC", DEFAULT_CONFIG.only_arithmetic)
    overrides["filter_equivalents"] = _env_flag("NUMBERS24_FILTER_EQUIVALENTS", DEFAULT_CONFIG.filter_equivalents)
    return replace(DEFAULT_CONFIG, **overrides)
