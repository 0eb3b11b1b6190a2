import unittest

import numpy as np

from spectrum_source import PlaybackSource, SampleBufferSource


class TestSampleBufferSource(unittest.TestCase):
    def test_satisfies_protocol(self):
        source = SampleBufferSource(np.zeros(16), sample_rate=8.0)
        self.assertIsInstance(source, PlaybackSource)

    def test_play_stop(self):
        source = SampleBufferSource(np.zeros(100), sample_rate=100.0)
        self.assertFalse(source.is_playing)
        source.play()
        self.assertTrue(source.is_playing)
        source.advance(0.5)
        self.assertEqual(source.position, 50)
        source.stop()
        self.assertFalse(source.is_playing)
        self.assertEqual(source.position, 0)

    def test_stops_at_end_without_loop(self):
        source = SampleBufferSource(np.zeros(100), sample_rate=100.0)
        source.play()
        source.advance(2.0)
        self.assertFalse(source.is_playing)
        self.assertEqual(source.position, 100)

    def test_loop_wraps_playhead(self):
        source = SampleBufferSource(np.zeros(100), sample_rate=100.0, loop=True)
        source.play()
        source.advance(1.25)
        self.assertTrue(source.is_playing)
        self.assertEqual(source.position, 25)

    def test_tiny_frame_steps_still_reach_end(self):
        # 1e-5 s at 44.1kHz is 0.441 samples per frame
        source = SampleBufferSource.from_tone(440.0, seconds=0.01, sample_rate=44100.0)
        self.assertAlmostEqual(source.duration, 0.01)
        source.play()
        frames = 0
        while source.is_playing and frames < 2000:
            source.advance(1e-5)
            frames += 1
        self.assertFalse(source.is_playing)
        self.assertLess(frames, 1010)

    def test_fractional_steps_accumulate(self):
        source = SampleBufferSource(np.arange(100, dtype=float), sample_rate=100.0)
        source.play()
        for _ in range(5):
            source.advance(0.004)
        self.assertAlmostEqual(source.position, 2.0)
        source.advance(0.015)
        self.assertAlmostEqual(source.position, 3.5)

    def test_spectrum_reads_from_whole_sample_playhead(self):
        samples = np.zeros(64)
        samples[3] = 1.0
        source = SampleBufferSource(samples, sample_rate=100.0)
        source.play()
        source.advance(0.035)
        # playhead 3.5 reads from sample 3, so the impulse sits at the frame start
        spectrum = source.get_spectrum_data(4)
        np.testing.assert_allclose(spectrum, np.full(4, 1.0 / 8.0))

    def test_empty_buffer_never_plays(self):
        source = SampleBufferSource(np.zeros(0), sample_rate=100.0)
        source.play()
        self.assertFalse(source.is_playing)

    def test_spectrum_length_and_padding(self):
        source = SampleBufferSource(np.ones(10), sample_rate=100.0)
        spectrum = source.get_spectrum_data(64)
        self.assertEqual(spectrum.shape, (64,))
        self.assertTrue(np.all(spectrum >= 0.0))

    def test_tone_peaks_at_its_bin(self):
        # 2 * resolution = 512 samples at 512Hz => 1Hz per rfft bin
        source = SampleBufferSource.from_tone(40.0, seconds=1.0, sample_rate=512.0, amplitude=1.0)
        spectrum = source.get_spectrum_data(256)
        self.assertEqual(int(np.argmax(spectrum)), 40)
        self.assertAlmostEqual(spectrum[40], 0.5, places=6)

    def test_rejects_multichannel(self):
        with self.assertRaises(ValueError):
            SampleBufferSource(np.zeros((10, 2)), sample_rate=100.0)
        with self.assertRaises(ValueError):
            SampleBufferSource(np.zeros(10), sample_rate=0.0)


if __name__ == "__main__":
    unittest.main()
