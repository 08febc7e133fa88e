import logging
import os
import time

import pytesseract  # pyright: ignore[reportMissingImports]

from dam_agent.errors import OCRError
from dam_agent.model.models import CaptureSample, ExtractedText, TextRegion

logger = logging.getLogger(__name__)

DEFAULT_TESSERACT_CONFIG = "--psm 6"


class OCRService:
    """Text extraction from a capture using Tesseract.

    Samples that already carry text (``text_hint``) are passed through
    without touching Tesseract. Per-word confidences are averaged into
    ``ExtractedText.confidence`` for display only.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        config: str = DEFAULT_TESSERACT_CONFIG,
        lang: str = "eng",
    ) -> None:
        tesseract_cmd = tesseract_cmd or os.environ.get("DAM_TESSERACT_CMD")
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.config = config
        self.lang = lang

    def extract_text(self, capture: CaptureSample) -> ExtractedText:
        if capture.text_hint is not None:
            return ExtractedText(
                text=capture.text_hint,
                confidence=1.0,
                timestamp=capture.timestamp,
            )
        if capture.image_data is None:
            return ExtractedText(text="", confidence=0.0, timestamp=capture.timestamp)

        started = time.perf_counter()
        try:
            data = pytesseract.image_to_data(
                capture.image_data,
                lang=self.lang,
                config=self.config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            msg = f"Tesseract failed: {e}"
            raise OCRError(msg) from e

        regions = self._regions(data)
        text = " ".join(r.text for r in regions)
        confidence = (
            sum(r.confidence for r in regions) / len(regions) if regions else 0.0
        )
        logger.debug(
            "OCR extracted %d chars in %d regions (%.2fs)",
            len(text),
            len(regions),
            time.perf_counter() - started,
        )
        return ExtractedText(
            text=text,
            confidence=confidence,
            timestamp=capture.timestamp,
            regions=tuple(regions),
        )

    @staticmethod
    def _regions(data: dict[str, list]) -> list[TextRegion]:
        regions: list[TextRegion] = []
        for i, raw in enumerate(data.get("text", [])):
            word = str(raw).strip()
            confidence = float(data["conf"][i])
            # Tesseract reports -1 for layout rows without text.
            if not word or confidence < 0:
                continue
            regions.append(
                TextRegion(
                    text=word,
                    confidence=confidence / 100.0,
                    bbox={
                        "x": int(data["left"][i]),
                        "y": int(data["top"][i]),
                        "width": int(data["width"][i]),
                        "height": int(data["height"][i]),
                    },
                )
            )
        return regions


__all__ = ["OCRService"]
