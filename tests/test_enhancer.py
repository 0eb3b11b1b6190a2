import unittest

import numpy as np

from config import ConfigError
from enhancer import enhance, enhancement_weights


class TestEnhancer(unittest.TestCase):
    def test_three_band_ramp(self):
        enhanced = enhance([1.0, 1.0, 1.0], max_enhance=100.0)
        np.testing.assert_allclose(enhanced, [50.0, 100.0, 150.0])

    def test_weights_strictly_increase(self):
        weights = enhancement_weights(10, 100.0)
        self.assertTrue(np.all(np.diff(weights) > 0))
        self.assertAlmostEqual(weights[0], 100.0 / 9.0)

    def test_equal_raw_values_favor_higher_bands(self):
        enhanced = enhance(np.full(8, 0.25), max_enhance=40.0)
        for i in range(len(enhanced) - 1):
            self.assertLess(enhanced[i], enhanced[i + 1])

    def test_zero_stays_zero(self):
        enhanced = enhance(np.zeros(5), max_enhance=100.0)
        self.assertTrue(np.all(enhanced == 0.0))

    def test_raw_not_modified(self):
        raw = np.array([2.0, 3.0])
        enhance(raw, max_enhance=10.0)
        self.assertEqual(raw.tolist(), [2.0, 3.0])

    def test_single_band_rejected(self):
        with self.assertRaises(ConfigError):
            enhance([1.0], max_enhance=100.0)
        with self.assertRaises(ConfigError):
            enhancement_weights(0, 100.0)


if __name__ == "__main__":
    unittest.main()
