"""QR decoding of camera frames and scanner start/stop state."""
import logging
from typing import List, Optional

import cv2
import numpy as np

from src.utils.exceptions import DeviceUnavailableError

logger = logging.getLogger(__name__)

MSG_DEVICE_UNAVAILABLE = "Camera permission denied or no camera found."


class QRDecoder:
    """Decodes QR payloads from encoded image bytes (PNG/JPEG)."""

    def __init__(self):
        self.detector = cv2.QRCodeDetector()

    def decode(self, image_bytes: Optional[bytes]) -> List[str]:
        """
        Decode every QR code in a frame.

        Args:
            image_bytes: Encoded image from the camera

        Returns:
            List[str]: Non-empty decoded payloads, in detection order

        Raises:
            DeviceUnavailableError: If there is no frame or it cannot be decoded
        """
        if not image_bytes:
            raise DeviceUnavailableError("No camera frame received")

        nparr = np.frombuffer(image_bytes, np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
        if image is None:
            raise DeviceUnavailableError("Camera frame is not a readable image")

        found, decoded_info, _, _ = self.detector.detectAndDecodeMulti(image)
        if not found:
            return []

        return [text for text in decoded_info if text]


class ScannerController:
    """Start/stop state around a decoder; frames are ignored while stopped."""

    def __init__(self, decoder: Optional[QRDecoder] = None):
        self.decoder = decoder or QRDecoder()
        self.is_scanning = False

    def start(self) -> None:
        if self.is_scanning:
            return
        self.is_scanning = True
        logger.info("Scanner started")

    def stop(self) -> None:
        if not self.is_scanning:
            return
        self.is_scanning = False
        logger.info("Scanner stopped")

    def process_frame(self, image_bytes: Optional[bytes]) -> List[str]:
        """
        Decode one frame while scanning.

        Returns:
            List[str]: Decoded payloads ([] when stopped or no QR found)

        Raises:
            DeviceUnavailableError: If the frame is unusable; scanning is stopped
        """
        if not self.is_scanning:
            return []

        try:
            return self.decoder.decode(image_bytes)
        except DeviceUnavailableError:
            self.stop()
            raise
