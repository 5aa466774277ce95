from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from standoff import cli, cli_doc

ALTO = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<alto xmlns="http://www.loc.gov/standards/alto/ns-v3#"><Layout><Page ID="P1">'
    '<PrintSpace ID="PS1"><TextBlock ID="TB1">'
    '<TextLine ID="TL1"><String ID="S1" CONTENT="Hel-" SUBS_CONTENT="Hello" SUBS_TYPE="HypPart1"/></TextLine>'
    '<TextLine ID="TL2"><String ID="S2" CONTENT="lo" SUBS_CONTENT="Hello" SUBS_TYPE="HypPart2"/>'
    '<SP/><String ID="S3" CONTENT="there"/></TextLine>'
    "</TextBlock></PrintSpace></Page></Layout></alto>\n"
)


def _run(main, argv: list[str]) -> tuple[int, str]:
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        code = main(argv)
    return code, buf.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.alto = self.root / "page.xml"
        self.alto.write_text(ALTO, encoding="utf-8")
        self.broken = self.root / "broken.xml"
        self.broken.write_text("<alto><Layout>", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_single_file_writes_json_and_text(self) -> None:
        out = self.root / "out" / "page.standoff.json"
        text_out = self.root / "out" / "page.txt"
        code, stdout = _run(cli.main, ["--input", str(self.alto), "--out", str(out), "--text-out", str(text_out)])

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(stdout), {"ok": True, "pages": 1, "annotations": 6, "text_length": 11})
        self.assertEqual(text_out.read_text(encoding="utf-8"), "Hello there")

        payload = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(payload["annotation_set"], "Original markups")
        self.assertEqual(payload["text"], "Hello there")
        self.assertTrue(out.read_text(encoding="utf-8").endswith("}\n"))

    def test_relpath_requires_data_root(self) -> None:
        code, stdout = _run(cli.main, ["--relpath", "page.xml", "--out", str(self.root / "o.json")])
        self.assertEqual(code, 2)
        self.assertEqual(stdout, "")

    def test_relpath_under_data_root(self) -> None:
        out = self.root / "o.json"
        code, _ = _run(
            cli.main,
            ["--relpath", "page.xml", "--data-root", str(self.root), "--out", str(out), "--annotation-set", "ALTO"],
        )
        self.assertEqual(code, 0)
        payload = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(payload["source_relpath"], "page.xml")
        self.assertEqual(payload["annotation_set"], "ALTO")

    def test_malformed_input_soft_and_strict(self) -> None:
        out = self.root / "soft.json"
        with self.assertLogs("ingest.module", level="WARNING"):
            code, stdout = _run(cli.main, ["--input", str(self.broken), "--out", str(out)])
        self.assertEqual(code, 2)
        self.assertFalse(json.loads(stdout)["ok"])
        payload = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(payload["errors"][0]["code"], "ALTO_PARSE_ERROR")
        self.assertEqual(payload["text"], "")

        strict_out = self.root / "strict.json"
        with self.assertLogs("standoff.cli", level="ERROR"):
            code, stdout = _run(cli.main, ["--input", str(self.broken), "--out", str(strict_out), "--strict"])
        self.assertEqual(code, 2)
        self.assertEqual(stdout, "")
        self.assertFalse(strict_out.exists())

    def test_document_mode_cli(self) -> None:
        ledger = self.root / "ledger.json"
        ledger.write_text(
            json.dumps({"doc_id": "doc-1", "sources": [{"source_relpath": "page.xml"}]}) + "\n", encoding="utf-8"
        )
        out_dir = self.root / "doc_out"
        out_doc = self.root / "doc_out" / "doc-1.index.json"

        code, stdout = _run(
            cli_doc.main,
            [
                "--ledger",
                str(ledger),
                "--data-root",
                str(self.root),
                "--out-dir",
                str(out_dir),
                "--out-doc",
                str(out_doc),
            ],
        )
        self.assertEqual(code, 0)
        self.assertEqual(stdout.strip(), "doc_id=doc-1 sources=1 ok=True")
        self.assertTrue((out_dir / "doc-1" / "0000_page.standoff.json").exists())
        self.assertEqual(json.loads(out_doc.read_text(encoding="utf-8"))["ok"], True)

    def test_document_mode_cli_missing_ledger(self) -> None:
        code, stdout = _run(
            cli_doc.main,
            [
                "--ledger",
                str(self.root / "missing.json"),
                "--data-root",
                str(self.root),
                "--out-dir",
                str(self.root / "doc_out"),
            ],
        )
        self.assertEqual(code, 2)
        self.assertEqual(stdout.strip(), "doc_id=<missing> sources=0 ok=False")


if __name__ == "__main__":
    unittest.main()
