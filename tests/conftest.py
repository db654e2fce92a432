import numpy as np
import pytest


@pytest.fixture
def frame():
    # 200 wide, 100 high, BGR
    return np.zeros((100, 200, 3), dtype=np.uint8)
