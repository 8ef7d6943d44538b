import numpy as np
from PIL import Image, UnidentifiedImageError
from io import BytesIO
import logging

from core.config import get_ocr_lang
from core.errors import OCRError

logger = logging.getLogger(__name__)

class OCREngine:
    def __init__(self, lang: str = None):
        # PaddleOCR is an optional extra (pip install .[ocr]); import on first use
        try:
            from paddleocr import PaddleOCR
        except ImportError as e:
            raise OCRError("PaddleOCR is not installed; install the 'ocr' extra.") from e
        logger.info("Loading PaddleOCR model...")
        # use_angle_cls=True enables orientation correction
        self.ocr = PaddleOCR(use_angle_cls=True, lang=lang or get_ocr_lang(), show_log=False)

    def extract_text(self, image_bytes: bytes) -> str:
        """
        Extracts text from image bytes. Raises OCRError on unreadable images or engine failure.
        """
        try:
            img = Image.open(BytesIO(image_bytes)).convert('RGB')
        except (UnidentifiedImageError, OSError) as e:
            raise OCRError(f"Unreadable image: {e}") from e
        img_np = np.array(img)

        try:
            result = self.ocr.ocr(img_np, cls=True)
        except Exception as e:
            logger.error("OCR Failed: %s", e)
            raise OCRError(str(e)) from e

        # Result structure: [[[[x1,y1],[x2,y2]...], ("text", confidence)], ...]
        lines = []
        if result and result[0]:
            for line in result[0]:
                lines.append(line[1][0])
        return "\n".join(lines)
