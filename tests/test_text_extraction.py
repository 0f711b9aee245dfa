import tempfile
import unittest
from pathlib import Path

from infrastructure.text_extraction.html_extractor import HtmlExtractor
from infrastructure.text_extraction.plain_text_extractor import PlainTextExtractor
from scripts.ingest_resource import load_document


class TestPlainTextExtractor(unittest.TestCase):
    def test_normalises_line_endings_and_bom(self):
        raw = "\ufeff# Title\r\n\r\nBody\rline".encode("utf-8")

        self.assertEqual(PlainTextExtractor().extract(raw), "# Title\n\nBody\nline")

    def test_accepts_str(self):
        self.assertEqual(PlainTextExtractor().extract("a\r\nb"), "a\nb")


class TestHtmlExtractor(unittest.TestCase):
    def test_block_elements_become_paragraphs(self):
        html = """
        <html><head><style>p { color: red; }</style><script>var x = 1;</script></head>
        <body>
          <h1>Auto   layout</h1>
          <p>Frames stack
             their children.</p>
          <ul><li>Padding</li><li>Spacing</li></ul>
        </body></html>
        """

        text = HtmlExtractor().extract(html)

        self.assertEqual(text, "Auto layout\n\nFrames stack their children.\n\nPadding\n\nSpacing")

    def test_pre_blocks_are_fenced(self):
        html = "<p>Example:</p><pre>const a = 1;\nconst b = 2;</pre><p>Done.</p>"

        text = HtmlExtractor().extract(html.encode("utf-8"))

        self.assertEqual(text, "Example:\n\n```\nconst a = 1;\nconst b = 2;\n```\n\nDone.")

    def test_tags_inside_pre_stay_in_one_fenced_block(self):
        html = "<pre><code>first();<br>second();<br/><div>third();</div></code></pre><p>After.</p>"

        text = HtmlExtractor().extract(html)

        self.assertEqual(text, "```\nfirst();\nsecond();\nthird();\n```\n\nAfter.")


class TestLoadDocument(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_markdown_file_defaults(self):
        path = self.root / "auto-layout.md"
        path.write_text("# Auto layout\r\n\r\nBody.", encoding="utf-8")

        document = load_document(path, source="figma_docs")

        self.assertEqual(document.id, "")
        self.assertEqual(document.source, "figma_docs")
        self.assertEqual(document.title, "auto-layout")
        self.assertEqual(document.content, "# Auto layout\n\nBody.")
        self.assertEqual(document.url, path.resolve().as_uri())
        self.assertEqual(document.metadata["path"], str(path.resolve()))

    def test_explicit_title_and_url(self):
        path = self.root / "page.html"
        path.write_text("<p>Hello</p>", encoding="utf-8")

        document = load_document(path, source="docs", title="Hello page", url="https://help.example.com/hello")

        self.assertEqual(document.title, "Hello page")
        self.assertEqual(document.url, "https://help.example.com/hello")
        self.assertEqual(document.content, "Hello")

    def test_unsupported_suffix(self):
        path = self.root / "slides.pptx"
        path.write_bytes(b"binary")

        with self.assertRaises(ValueError):
            load_document(path, source="docs")


if __name__ == "__main__":
    unittest.main()
