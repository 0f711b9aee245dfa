import unittest

from infrastructure.splitting.boundary_splitter import generate_chunks


class TestGenerateChunks(unittest.TestCase):
    def test_text_shorter_than_window_is_single_trimmed_chunk(self):
        text = "  " + "a" * 9000 + "\n"

        chunks = generate_chunks(text, chunk_size=10000)

        self.assertEqual(chunks, ["a" * 9000])

    def test_splits_at_last_code_fence_not_mid_block(self):
        text = (
            "a" * 3000
            + "\n\n"
            + "b" * 1000
            + "```python\n"
            + "c" * 2000
            + "\n```\n"
            + "d" * 2000
            + ". "
            + "e" * 1000
            + "```js\n"
            + "f" * 3000
            + "\n```"
        )

        chunks = generate_chunks(text, chunk_size=10000)

        self.assertEqual(len(chunks), 2)
        self.assertTrue(chunks[0].endswith("e" * 1000))
        self.assertNotIn("```js", chunks[0])
        self.assertEqual(chunks[1], "```js\n" + "f" * 3000 + "\n```")

    def test_paragraph_break_when_no_fence(self):
        text = "a" * 5000 + "\n\n" + "b" * 6000

        self.assertEqual(generate_chunks(text, chunk_size=10000), ["a" * 5000, "b" * 6000])

    def test_sentence_break_keeps_period(self):
        text = "a" * 5000 + ". " + "b" * 6000

        self.assertEqual(generate_chunks(text, chunk_size=10000), ["a" * 5000 + ".", "b" * 6000])

    def test_early_fence_falls_back_to_paragraph(self):
        text = "a" * 100 + "```" + "b" * 4897 + "\n\n" + "c" * 8000

        chunks = generate_chunks(text, chunk_size=10000)

        self.assertEqual(chunks[0], "a" * 100 + "```" + "b" * 4897)
        self.assertEqual(chunks[1], "c" * 8000)

    def test_breakpoints_before_threshold_are_ignored(self):
        text = "a" * 1000 + "\n\n" + "b" * 12000

        chunks = generate_chunks(text, chunk_size=10000)

        self.assertEqual(len(chunks), 2)
        self.assertEqual(len(chunks[0]), 10000)
        self.assertEqual(chunks[1], "b" * 3002)

    def test_text_without_whitespace_terminates(self):
        chunks = generate_chunks("x" * 25000, chunk_size=10000)

        self.assertEqual([len(chunk) for chunk in chunks], [10000, 10000, 5000])

    def test_tiny_window_terminates(self):
        chunks = generate_chunks("ab c. d\n\ne", chunk_size=1, overlap=0)

        self.assertEqual("".join(chunks), "abc.de")

    def test_overlap_does_not_repeat_text(self):
        text = " ".join(f"Sentence number {i} ends here." for i in range(2000))

        chunks = generate_chunks(text, chunk_size=1000, overlap=500)

        self.assertLessEqual(sum(len(chunk) for chunk in chunks), len(text))
        for first, second in zip(chunks, chunks[1:]):
            self.assertFalse(text.find(second) < text.find(first) + len(first))

    def test_is_deterministic(self):
        text = ("Intro paragraph. " * 300 + "\n\n```\ncode\n```\n") * 20

        first = generate_chunks(text, chunk_size=2000, overlap=200)
        second = generate_chunks(text, chunk_size=2000, overlap=200)

        self.assertEqual(first, second)
        self.assertLessEqual(sum(len(chunk) for chunk in first), len(text))

    def test_empty_and_blank_text_yield_no_chunks(self):
        self.assertEqual(generate_chunks(""), [])
        self.assertEqual(generate_chunks("   \n\n  "), [])
        self.assertEqual(generate_chunks(" " * 25000 + "tail", chunk_size=10000), ["tail"])

    def test_rejects_invalid_parameters(self):
        with self.assertRaises(ValueError):
            generate_chunks("text", chunk_size=0)
        with self.assertRaises(ValueError):
            generate_chunks("text", chunk_size=10, overlap=-1)


if __name__ == "__main__":
    unittest.main()
