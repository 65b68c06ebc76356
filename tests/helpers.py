import asyncio
import base64
import io

from PIL import Image

from core.domain import GlossaryTerm, SimplificationResult


class StubExtractor:
    def __init__(self, text="The applicant must submit Form 12-B before 31/03/2024.", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def extract_text(self, file_path, file_kind, language):
        with open(file_path, "rb") as fh:
            size = len(fh.read())
        self.calls.append({"path": file_path, "kind": file_kind, "language": language, "size": size})
        if self.error is not None:
            raise self.error
        return self.text


class StubSimplifier:
    def __init__(self, result=None, error=None):
        self.error = error
        self.result = result or SimplificationResult(
            simplified_text="You need to fill Form 12-B. Do it before 31/03/2024.",
            glossary=[
                GlossaryTerm("31/03/2024", "The last date to submit the form."),
                GlossaryTerm("Form 12-B", "The application form named in the notice."),
            ],
        )
        self.calls = []

    async def simplify(self, text, language):
        self.calls.append((text, language))
        if self.error is not None:
            raise self.error
        return self.result


class RecordingRenderer:
    media_type = "application/pdf"
    file_extension = "pdf"

    def __init__(self):
        self.calls = []

    def render(self, simplified_text, glossary, target_language):
        try:
            asyncio.get_running_loop()
            on_loop = True
        except RuntimeError:
            on_loop = False
        self.calls.append({"text": simplified_text, "language": target_language, "on_loop": on_loop})
        return b"%PDF-1.4 stub"


def png_bytes(size=(32, 32)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, "white").save(buf, "PNG")
    return buf.getvalue()


def data_url(content: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(content).decode()}"
