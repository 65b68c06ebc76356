from utils.text_chunking import chunk_text


def test_empty_and_short_inputs():
    assert chunk_text("") == []
    assert chunk_text("   \n ") == []
    assert chunk_text("  Short notice.  ") == ["Short notice."]


def test_long_text_respects_max_chars():
    paragraphs = [f"Paragraph {i}. " + "The applicant must attend the hearing. " * 20 for i in range(30)]
    text = "\n\n".join(paragraphs)

    chunks = chunk_text(text, max_chars=2000)

    assert len(chunks) > 1
    assert all(len(chunk) <= 2000 for chunk in chunks)
    assert chunks[0].startswith("Paragraph 0.")
    assert "Paragraph 29." in chunks[-1]


def test_devanagari_sentences_split_on_danda():
    sentence = "यह सूचना सभी नागरिकों के लिए है।"
    text = sentence * 200

    chunks = chunk_text(text, max_chars=500)

    assert len(chunks) > 1
    assert all(len(chunk) <= 500 for chunk in chunks)
