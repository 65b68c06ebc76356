"""PDF text-layer extraction with PyMuPDF."""
import asyncio
from typing import List
import fitz  # PyMuPDF


class PyMuPDFTextLayerReader:
    """
    Reads the embedded (selectable) text of a PDF.

    Scanned PDFs have no text layer and come back empty; pages are never
    rasterized for OCR here.
    """

    def read_pages(self, file_path: str) -> List[str]:
        """Return the text of every page, in page order."""
        with fitz.open(file_path) as doc:
            return [page.get_text("text") for page in doc]

    def read(self, file_path: str) -> str:
        pages = [text.strip() for text in self.read_pages(file_path)]
        return "\n\n".join(text for text in pages if text)

    async def read_async(self, file_path: str) -> str:
        """Async version of read(), runs in a worker thread."""
        return await asyncio.to_thread(self.read, file_path)
