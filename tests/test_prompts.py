from services.prompts import PromptOptions, build_messages, build_system_prompt


def test_default_prompt_mentions_output_contract():
    prompt = build_system_prompt()

    assert '"simplifiedText"' in prompt
    assert '"glossary"' in prompt
    assert "numbers, dates and codes first" in prompt
    assert "3-5 sentences" in prompt


def test_options_change_prompt():
    prompt = build_system_prompt(PromptOptions(
        min_sentences_per_idea=2,
        max_sentences_per_idea=4,
        preserve_paragraphs=False,
        numbers_first_glossary=False,
        exhaustive_glossary=False,
    ))

    assert "2-4 sentences" in prompt
    assert "STRUCTURE:" not in prompt
    assert "numbers, dates and codes first" not in prompt
    assert "most important numbers" in prompt


def test_messages_carry_language_and_text():
    messages = build_messages("Circular No. 7 of 2024", "Kannada")

    assert [m["role"] for m in messages] == ["system", "user"]
    assert "Kannada" in messages[1]["content"]
    assert messages[1]["content"].endswith("Circular No. 7 of 2024")
