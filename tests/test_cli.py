"""Tests for the command line interface."""

from typer.testing import CliRunner

from evanaliz.cli import app

runner = CliRunner()


class TestScan:
    def test_price_and_rent(self):
        result = runner.invoke(app, ["scan", "Fiyat", "5.000.000 TL", "Kira", "25.000 TL"])
        assert result.exit_code == 0, result.output
        assert "OVERPRICED" in result.output

    def test_from_file(self, tmp_path):
        path = tmp_path / "screen.txt"
        path.write_text("1.000.000 TL\n25.000 TL\n", encoding="utf-8")
        result = runner.invoke(app, ["scan", "--file", str(path)])
        assert result.exit_code == 0, result.output
        assert "LOGICAL INVESTMENT" in result.output

    def test_from_stdin(self):
        result = runner.invoke(app, ["scan", "--file", "-"], input="@40.8736,29.3064\n")
        assert result.exit_code == 0, result.output
        assert "LOCATION FOUND" in result.output

    def test_no_data(self):
        result = runner.invoke(app, ["scan", "Kira", "Satılık"])
        assert result.exit_code == 1
        assert "E001" in result.output

    def test_nothing_to_scan(self):
        result = runner.invoke(app, ["scan"])
        assert result.exit_code == 2

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "screen.txt"
        path.write_bytes(b"\xff\xfe5.000.000 TL\n")
        result = runner.invoke(app, ["scan", "--file", str(path)])
        assert result.exit_code == 1
        assert "E999" in result.output

    def test_price_only_echoes_texts_seen(self):
        result = runner.invoke(app, ["scan", "Fiyat", "5.000.000 TL"])
        assert result.exit_code == 1
        assert "E002" in result.output
        assert "Texts seen: Fiyat | 5000000 TL" in result.output


class TestAnalyze:
    def test_happy_path(self):
        result = runner.invoke(app, ["analyze", "--price", "1000000", "--rent", "25000"])
        assert result.exit_code == 0, result.output
        assert "LOGICAL INVESTMENT" in result.output

    def test_invalid_price(self):
        result = runner.invoke(app, ["analyze", "--price", "0", "--rent", "25000"])
        assert result.exit_code == 1
        assert "E200" in result.output


class TestDecide:
    def test_happy_path(self):
        result = runner.invoke(app, ["decide", "--price", "5000000", "--rent", "25000", "--years", "5"])
        assert result.exit_code == 0, result.output
        assert "Scenarios" in result.output
        assert "Break-even" in result.output

    def test_invalid_rent(self):
        result = runner.invoke(app, ["decide", "--price", "5000000", "--rent=-1"])
        assert result.exit_code == 1

    def test_infinite_price(self):
        result = runner.invoke(app, ["decide", "--price", "inf", "--rent", "25000"])
        assert result.exit_code == 1
        assert "E200" in result.output


def test_validate():
    result = runner.invoke(app, ["validate"])
    assert result.exit_code == 0, result.output
    assert "Parity OK" in result.output


def test_config_show():
    result = runner.invoke(app, ["config-show"])
    assert result.exit_code == 0, result.output
    assert "monthly_interest_rate" in result.output
