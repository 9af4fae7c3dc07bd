from __future__ import annotations

import pytest

from pod_inspect.core.masking import MASK_TOKEN, RegexMasker, build_masker


def test_mask_logs_redacts_every_container() -> None:
    masker = build_masker([r"token-\d+", r"password=\S+"])

    masked = masker.mask_logs(
        {
            "app": "auth with token-123\nok\n",
            "db": "password=hunter2 rejected",
        }
    )

    assert masked == {
        "app": f"auth with {MASK_TOKEN}\nok\n",
        "db": f"{MASK_TOKEN} rejected",
    }


def test_empty_masker_is_disabled_and_leaves_text_alone() -> None:
    masker = RegexMasker()

    assert masker.enabled is False
    assert masker.mask_text("token-1") == "token-1"


def test_build_masker_rejects_invalid_regex() -> None:
    with pytest.raises(ValueError, match="invalid masking regex"):
        build_masker([r"(unclosed"])
