from llm.legal_prompt import build_legal_prompt, build_prompt_parts, language_name, normalize_language
from utils.qa_helpers import classify_file_type


def test_language_resolution():
    assert normalize_language("hindi") == "hindi"
    assert normalize_language("Hindi ") == "hindi"
    assert normalize_language(None) == "english"
    assert normalize_language("tamil") == "english"
    assert language_name("hindi") == "Hindi"
    assert language_name("french") == "English"


def test_prompt_contains_instruction_and_question():
    prompt = build_legal_prompt("Can I get bail?", "english", has_file=False)
    assert prompt.startswith("You are a helpful Indian legal assistant.")
    assert "Respond in English." in prompt
    assert "consulting a lawyer if the issue is serious" in prompt
    assert prompt.endswith("\n\nQuestion: Can I get bail?")
    assert "Analyze the attached" not in prompt


def test_prompt_without_question_only_asks_for_analysis():
    prompt = build_legal_prompt("", "hindi", has_file=True)
    assert "Question:" not in prompt
    assert prompt.endswith("Analyze the attached document/image and answer the question based on it.")


def test_prompt_parts_order():
    parts = build_prompt_parts("Q", "english", file_bytes=b"%PDF", mime_type="application/pdf")
    assert len(parts) == 2
    assert parts[0].text and not parts[0].is_inline
    assert parts[1].is_inline and parts[1].mime_type == "application/pdf"

    assert len(build_prompt_parts("Q", "english")) == 1


def test_file_type_classification():
    assert classify_file_type("image/jpeg") == "image"
    assert classify_file_type("image/png") == "image"
    assert classify_file_type("application/pdf") == "document"
    assert classify_file_type("text/plain") == "document"
