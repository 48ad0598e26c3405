# Camera/MediaPipe provider lives in hand_input and is imported lazily by the GUI.
from pinch_tetris.input.conditioner import HandSample, SignalConditioner, route_side

__all__ = ["HandSample", "SignalConditioner", "route_side"]
