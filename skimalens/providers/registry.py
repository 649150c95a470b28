"""Provider registry -- maps conversation DataKinds to their provider config"""

from __future__ import annotations

from skimalens.core.exceptions import UnsupportedDataKindError
from skimalens.core.types import DataKind
from skimalens.providers.chatgpt.flattener import (
    count_chatgpt_records,
    extract_messages,
    validate_chatgpt_conversation,
)
from skimalens.providers.claude.normalizer import (
    count_claude_records,
    normalize_claude_messages,
    validate_claude_conversation,
)
from skimalens.providers.types import ProviderConfig

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

PROVIDER_REGISTRY: dict[DataKind, ProviderConfig] = {
    DataKind.CLAUDE_CONVERSATION: ProviderConfig(
        name="Claude",
        validate=validate_claude_conversation,
        count_records=count_claude_records,
        timeline=normalize_claude_messages,
        id_field="uuid",
        title_field="name",
        updated_field="updated_at",
        created_field="created_at",
    ),
    DataKind.CHATGPT_CONVERSATION: ProviderConfig(
        name="ChatGPT",
        validate=validate_chatgpt_conversation,
        count_records=count_chatgpt_records,
        timeline=extract_messages,
        id_field="id",
        title_field="title",
        updated_field="update_time",
        created_field="create_time",
    ),
}


def get_provider_config(kind: DataKind | str) -> ProviderConfig:
    """Look up the provider config.

    Raises :class:`UnsupportedDataKindError` for kinds without a provider
    (cloudwatch logs, generic JSON/YAML, unknown).
    """
    try:
        return PROVIDER_REGISTRY[DataKind(kind)]
    except (KeyError, ValueError):
        raise UnsupportedDataKindError(str(kind)) from None


def find_provider_config(kind: DataKind | str) -> ProviderConfig | None:
    """Like :func:`get_provider_config` but returns ``None`` instead of raising."""
    try:
        return get_provider_config(kind)
    except UnsupportedDataKindError:
        return None
