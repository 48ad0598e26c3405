from __future__ import annotations
import logging
from typing import Dict, Optional

import cv2
import numpy as np
try:
    import mediapipe as mp
except ImportError:
    raise SystemExit("Install mediapipe first: `pip install mediapipe`.")
from absl import logging as absl_logging

from pinch_tetris.input.conditioner import (
    SIDES, THUMB_TIP, INDEX_TIP, HandSample, pinch_distance, route_side,
)

absl_logging.set_verbosity(absl_logging.ERROR)
logger = logging.getLogger(__name__)

mp_hands = mp.solutions.hands
mp_draw = mp.solutions.drawing_utils
mp_styles = mp.solutions.drawing_styles


def to_px(lm, w: int, h: int):
    return int(lm.x * w), int(lm.y * h)


class HandController:
    """Camera + MediaPipe Hands. ``poll`` returns one routed sample per side.

    The frame is processed unmirrored; mirroring happens when positions are
    mapped to the viewport, which is also why "Right" routes to the left hand.
    """

    def __init__(self, camera: int = 0, width: int = 1280, height: int = 720, draw: bool = False):
        self.cap = cv2.VideoCapture(camera)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        if not self.cap.isOpened():
            logger.warning("camera %d could not be opened; hands will read as absent", camera)
        else:
            logger.info("camera %d opened at %dx%d", camera, width, height)
        self.draw = draw

        self.hands = mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=2,
            model_complexity=1,
            min_detection_confidence=0.5,
            min_tracking_confidence=0.5,
        )

        # Mirrored BGR frame for the preview panel
        self.last_frame: Optional[np.ndarray] = None

    def poll(self) -> Dict[str, Optional[HandSample]]:
        samples: Dict[str, Optional[HandSample]] = {side: None for side in SIDES}

        ok, frame = self.cap.read()
        if not ok:
            return samples

        h, w = frame.shape[:2]
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        result = self.hands.process(rgb)

        if result.multi_hand_landmarks and result.multi_handedness:
            for lm, handed in zip(result.multi_hand_landmarks, result.multi_handedness):
                label = handed.classification[0].label  # "Left" / "Right"
                side = route_side(label)
                samples[side] = HandSample(landmarks=lm.landmark, pinch_distance=pinch_distance(lm.landmark))

                if self.draw:
                    mp_draw.draw_landmarks(
                        frame, lm, mp_hands.HAND_CONNECTIONS,
                        mp_styles.get_default_hand_landmarks_style(),
                        mp_styles.get_default_hand_connections_style(),
                    )
                    p_thumb = to_px(lm.landmark[THUMB_TIP], w, h)
                    p_index = to_px(lm.landmark[INDEX_TIP], w, h)
                    cv2.line(frame, p_thumb, p_index, (60, 200, 255), 2)

        self.last_frame = cv2.flip(frame, 1)
        return samples

    def get_last_frame(self) -> Optional[np.ndarray]:
        return self.last_frame

    def release(self):
        self.hands.close()
        self.cap.release()
