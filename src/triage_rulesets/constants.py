"""Triage constants shared across the SDK.

Several constants can be overridden via environment variables so that
deployments can point at another catalog, switch the default strategy or
change call-to-action links without code changes.
"""

import os
from pathlib import Path

# Catalog shipped with the package; TRIAGE_CATALOG_PATH points elsewhere.
PACKAGED_CATALOG_PATH = Path(__file__).parent / "rules" / "catalog.yaml"
DEFAULT_CATALOG_PATH = Path(os.getenv("TRIAGE_CATALOG_PATH") or PACKAGED_CATALOG_PATH)

# Strategy used when a caller does not pick one (see models.strategy).
DEFAULT_STRATEGY = os.getenv("TRIAGE_STRATEGY", "sequential_memory")

# TRIAGE_CTA_URL_<RECOMMENDATION_ID> overrides a recommendation's cta_url,
# e.g. TRIAGE_CTA_URL_FERRITINA=https://example.org/ferritina
CTA_URL_ENV_PREFIX = "TRIAGE_CTA_URL_"

# Upper bound reported by the progress calculator.
MAX_PROGRESS = 100
