"""
Tests for the command-line driver using the demo catalog.
"""

import pytest

from rollup_quotes.cli import create_cli_parser, main


def total_line(output: str) -> str:
    line = next(l for l in output.splitlines() if l.startswith("TOTAL:"))
    return line.split()[-1]


class TestCLI:
    def test_calculate_demo(self, capsys):
        exit_code = main(["calculate", "--width", "2", "--height", "2", "--demo"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Motor AC 200kg" in out
        assert total_line(out) == "2800.00"

    def test_calculate_with_optionals(self, capsys):
        exit_code = main([
            "calculate", "--width", "2", "--height", "2", "--quantity", "3",
            "--optional", "1", "--optional", "2", "--demo",
        ])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Pintura Eletrostática: 720.00" in out
        assert total_line(out) == "9360.00"

    def test_unresolved_hardware_exit_code(self, capsys):
        exit_code = main(["calculate", "--width", "20", "--height", "2", "--demo"])

        out = capsys.readouterr().out
        assert exit_code == 2
        assert "! No axle covers this width" in out

    def test_invalid_input_exit_code(self, capsys):
        exit_code = main(["calculate", "--width", "0", "--height", "2", "--demo"])

        assert exit_code == 1
        assert "Width must be greater than zero" in capsys.readouterr().err

    @pytest.mark.parametrize("width", ["nan", "inf"])
    def test_non_finite_width_exit_code(self, capsys, width):
        exit_code = main(["calculate", "--width", width, "--height", "2", "--demo"])

        assert exit_code == 1
        assert "Width must be a finite number" in capsys.readouterr().err

    def test_catalog_listing(self, capsys):
        assert main(["catalog", "axles", "--demo"]) == 0
        assert "Eixo 6" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_parser_defaults(self):
        args = create_cli_parser().parse_args(["calculate", "--width", "3", "--height", "2"])
        assert str(args.roll) == "0.4"
        assert args.quantity == 1
        assert args.optional is None

    def test_rejects_unknown_kind(self):
        with pytest.raises(SystemExit):
            create_cli_parser().parse_args(["catalog", "doors"])
