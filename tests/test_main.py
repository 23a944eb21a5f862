"""End-to-end tests for the command-line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from inkrecon.config import settings
from inkrecon.engine.errors import InvariantViolation
from inkrecon.main import main, parse_args


def _write(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Provider snapshots in each provider's native shape."""
    data = tmp_path / "data"
    data.mkdir()
    _write(
        data / settings.PROVIDER_FILES["dreamborn"],
        [
            {"id": "001-001", "name": "Ariel", "version": "On Human Legs", "rarity": "Uncommon", "setCode": "1"},
            {"id": "001-207", "name": "Elsa", "rarity": "Enchanted", "setCode": "1"},
            {"id": "P1-001", "name": "Stitch", "rarity": "Promo", "setCode": "P1"},
        ],
    )
    _write(
        data / settings.PROVIDER_FILES["lorcast"],
        {
            "cards": {
                "001-001": {"id": "crd_a", "name": "ariel", "rarity": "Uncommon", "set_code": "1"},
                "001-207": {"id": "crd_b", "name": "Elsa", "rarity": "Enchanted", "set_code": "1"},
            }
        },
    )
    _write(
        data / settings.PROVIDER_FILES["justtcg"],
        {
            "cards": {
                "001-001": {
                    "justtcg_id": "jt_a",
                    "tcgplayer_id": 493001,
                    "name": "Ariel - On Human Legs",
                    "rarity": "Uncommon",
                    "variants": {"Near Mint": {"price": 0.4}, "Near Mint Foil": {"price": 2.1}},
                },
                "010-900": {"justtcg_id": "jt_b", "name": "Whispers Booster Box", "rarity": None},
            }
        },
    )
    return data


class TestParseArgs:
    """Argument defaults come from settings."""

    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.data_dir == settings.DATA_DIR
        assert args.output_dir == settings.OUTPUT_DIR
        assert args.core_only is False
        assert args.split is False


class TestMain:
    """Full runs against snapshot files on disk."""

    def test_writes_all_documents(self, data_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        assert main(["--data-dir", str(data_dir), "--output-dir", str(out)]) == 0

        master = json.loads((out / settings.MASTER_DATABASE_FILE).read_text(encoding="utf-8"))
        report = json.loads((out / settings.MISMATCH_REPORT_FILE).read_text(encoding="utf-8"))
        coverage = json.loads((out / settings.COVERAGE_REPORT_FILE).read_text(encoding="utf-8"))

        assert sorted(master["cards"]) == ["001-001", "001-207", "010-900", "P1-001"]
        assert master["cards"]["001-001"]["name"] == "ariel"
        assert master["cards"]["001-001"]["title"] == "On Human Legs"
        assert master["cards"]["010-900"]["product_type"] == "sealed_product"
        assert [m["identifier"] for m in report["mismatches"]] == ["001-001"]
        assert report["mismatches"][0]["category"] == "case_difference"
        assert set(coverage["sets"]) == {"001", "010", "P1"}

    def test_core_only_drops_promos_and_unlisted_sets(self, data_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        assert main(["--data-dir", str(data_dir), "--output-dir", str(out), "--core-only"]) == 0

        master = json.loads((out / settings.MASTER_DATABASE_FILE).read_text(encoding="utf-8"))
        assert sorted(master["cards"]) == ["001-001", "001-207"]
        assert master["metadata"]["scope"] == settings.CORE_SET_CODES

    def test_keep_sealed_with_split(self, data_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        argv = ["--data-dir", str(data_dir), "--output-dir", str(out), "--core-only", "--keep-sealed", "--split"]
        assert main(argv) == 0

        master = json.loads((out / settings.MASTER_DATABASE_FILE).read_text(encoding="utf-8"))
        assert list(master["market_products"]) == ["010-900"]
        assert sorted(master["playable_cards"]) == ["001-001", "001-207"]

    def test_flags_high_value_missing_from_justtcg(self, data_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        assert main(["--data-dir", str(data_dir), "--output-dir", str(out)]) == 0

        master = json.loads((out / settings.MASTER_DATABASE_FILE).read_text(encoding="utf-8"))
        flagged = master["investigation_notes"]["high_value_missing"]["cards"]
        assert [f["identifier"] for f in flagged] == ["001-207"]

    def test_documents_share_one_timestamp(self, data_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        assert main(["--data-dir", str(data_dir), "--output-dir", str(out)]) == 0

        stamps = {
            json.loads((out / name).read_text(encoding="utf-8"))["metadata"]["created_at"]
            for name in (
                settings.MASTER_DATABASE_FILE,
                settings.MISMATCH_REPORT_FILE,
                settings.COVERAGE_REPORT_FILE,
            )
        }
        assert len(stamps) == 1

    def test_pricing_summary_reaches_master_database(self, data_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        assert main(["--data-dir", str(data_dir), "--output-dir", str(out)]) == 0

        master = json.loads((out / settings.MASTER_DATABASE_FILE).read_text(encoding="utf-8"))
        pricing = master["cards"]["001-001"]["pricing"]
        assert pricing["justtcg"] == {"has_pricing": True, "variant_count": 2, "tcgplayer_id": "493001"}
        assert pricing["dreamborn"]["has_pricing"] is False
        assert master["metadata"]["priced"] == {"dreamborn": 0, "lorcast": 0, "justtcg": 1}

    def test_no_snapshots_returns_error(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        assert main(["--data-dir", str(empty), "--output-dir", str(tmp_path / "out")]) == 1
        assert not (tmp_path / "out").exists()

    def test_unreadable_snapshot_returns_error(self, data_dir: Path, tmp_path: Path) -> None:
        (data_dir / settings.PROVIDER_FILES["lorcast"]).write_text("{not json", encoding="utf-8")
        assert main(["--data-dir", str(data_dir), "--output-dir", str(tmp_path / "out")]) == 1

    def test_all_identifiers_malformed_returns_error(self, tmp_path: Path) -> None:
        data = tmp_path / "data"
        data.mkdir()
        _write(data / settings.PROVIDER_FILES["dreamborn"], [{"id": "nodash", "name": "Broken"}])
        assert main(["--data-dir", str(data), "--output-dir", str(tmp_path / "out")]) == 1

    def test_duplicate_identifier_propagates(self, tmp_path: Path) -> None:
        data = tmp_path / "data"
        data.mkdir()
        _write(
            data / settings.PROVIDER_FILES["dreamborn"],
            [{"id": "001-001", "name": "Ariel"}, {"id": "001-001", "name": "Ariel"}],
        )
        with pytest.raises(InvariantViolation):
            main(["--data-dir", str(data), "--output-dir", str(tmp_path / "out")])
