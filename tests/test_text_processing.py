import pytest

from medscribe.utils.text_processing import (
    CORRECTION_MAP,
    clean_transcription_text,
    collapse_repeated_tokens,
)


def test_cleans_dictated_sentence():
    out = clean_transcription_text("Ptint has feaver and couh for 3 days, bp is high")
    assert out == "patient has fever and cough for 3 days, blood pressure is high"


def test_abbreviations_expand_only_as_whole_words():
    assert clean_transcription_text("HR 80, Temp normal") == "heart rate 80, temperature normal"
    # "temporal" and "hrs" contain table keys but are different words
    assert clean_transcription_text("temporal headache for 3 hrs") == "temporal headache for 3 hrs"


def test_collapses_whitespace_and_trims():
    assert clean_transcription_text("  pain \n\n in   the\tchest  ") == "pain in the chest"


@pytest.mark.parametrize("value", [None, "", "   \n\t "])
def test_blank_input_yields_empty_string(value):
    assert clean_transcription_text(value) == ""


def test_is_idempotent_on_clean_text():
    once = clean_transcription_text("Pt hx of diabetus, rx metformin")
    assert clean_transcription_text(once) == once


def test_correction_table_is_read_only():
    with pytest.raises(TypeError):
        CORRECTION_MAP["foo"] = "bar"


def test_collapse_repeated_tokens():
    assert collapse_repeated_tokens("s s s s pain") == "s pain"
    assert collapse_repeated_tokens("the the the cough") == "the cough"
    # two repetitions are plausible speech
    assert collapse_repeated_tokens("no no") == "no no"
