import pytest

from licensemap.config.policies import FingerprintPolicy
from licensemap.utils.fingerprint import fingerprint


@pytest.mark.parametrize(
    "label",
    ["Microsoft 365 Defender", "M365 Defender", "MS Defender", "Microsoft Defender", "O365 Defender"],
)
def test_brand_prefixes_collapse(label: str) -> None:
    assert fingerprint(label) == "defender"


def test_symbol_and_case_insensitive() -> None:
    assert fingerprint("Entra ID Plan 1") == fingerprint("entra id plan 1")
    assert fingerprint("Entra ID Plan 1") == fingerprint("EntraID Plan 1")
    assert fingerprint("Entra-ID  (Plan 1)") == "entraidplan1"


def test_plan_numbers_stay_distinct_by_default() -> None:
    assert fingerprint("Entra ID Plan 1") != fingerprint("Entra ID Plan 2")


def test_plan_suffix_can_be_stripped_by_policy() -> None:
    policy = FingerprintPolicy(strip_plan_suffix=True)
    assert fingerprint("Entra ID Plan 1", policy) == "entraid"
    assert fingerprint("Entra ID Plan 2", policy) == "entraid"


def test_trailing_qualifiers_removed() -> None:
    assert fingerprint("Defender for Business") == "defender"
    assert fingerprint("Teams for Enterprise") == "teams"
    assert fingerprint("Microsoft Defender for Business") == "defender"


def test_empty_and_missing_labels() -> None:
    assert fingerprint("") == ""
    assert fingerprint(None) == ""
    assert fingerprint("   ") == ""
    assert fingerprint("!!!") == ""


def test_prefix_rules_apply_once() -> None:
    # "ms " is stripped once; the second "ms " survives as part of the key.
    assert fingerprint("MS MS Defender") == "msdefender"


def test_prefix_requires_word_boundary() -> None:
    assert fingerprint("Msgraph") == "msgraph"
    assert fingerprint("Microsoft365 Apps") == "microsoft365apps"


def test_custom_prefix_policy() -> None:
    policy = FingerprintPolicy(prefix_patterns=[r"^contoso\s+"])
    assert fingerprint("Contoso Vault", policy) == "vault"
    assert fingerprint("Microsoft Vault", policy) == "microsoftvault"


def test_invalid_pattern_rejected() -> None:
    with pytest.raises(ValueError):
        FingerprintPolicy(prefix_patterns=["(unclosed"])
