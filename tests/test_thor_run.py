"""
Tests for the run interface, configuration loading and the command line.
"""

import io
import math

import pytest

from thor import (
    run,
    RunOptions,
    ThorConfig,
    load_config,
    create_global_scope,
    Interpreter,
    Number,
    BuiltInFunction,
    ConfigurationError,
    LexError,
    ParseError,
    DivisionError,
    StackOverflow,
)
from thor.__main__ import main


ADD_PROGRAM = "x = 2\ny = 3\nfn add(a,b){ return a + b }\nprint(add(x, y))"


class TestRun:
    """Test the one-call run interface."""

    def test_success(self):
        result = run("return 2 + 3 * 4")
        assert result.success
        assert result.value == Number(14)
        assert result.error is None
        assert result.error_message is None

    def test_end_to_end_prints_once(self, capsys):
        result = run(ADD_PROGRAM)
        assert result.success
        assert capsys.readouterr().out == "5\n"

    def test_no_logging_by_default(self):
        result = run("1")
        assert result.tokens is None
        assert result.ast is None

    def test_log_tokens(self):
        result = run("x = 1", RunOptions(log_tokens=True))
        assert result.tokens == (
            "[\n  IDENTIFIER('x'),\n  ASSIGN,\n  NUMBER(1.0),\n  EOF\n]"
        )
        assert result.ast is None

    def test_log_ast(self):
        result = run("x = 1 + 2, return x", RunOptions(log_ast=True))
        assert result.ast == "x = (1 + 2),\nreturn x"

    def test_lex_error(self):
        result = run("x = 1 @")
        assert not result.success
        assert isinstance(result.error, LexError)
        assert "E001" in result.error_message

    def test_parse_error_includes_source_line(self):
        result = run("x = 1\nfn f( { }")
        assert not result.success
        assert isinstance(result.error, ParseError)
        assert "fn f( { }" in result.error_message

    def test_runtime_error(self):
        result = run("y = 0\nreturn 1 / y")
        assert not result.success
        assert isinstance(result.error, DivisionError)
        assert "division by zero" in result.error_message
        assert "return 1 / y" in result.error_message

    def test_error_logged(self, caplog):
        with caplog.at_level("INFO", logger="thor"):
            run("nope")
        assert "nope is not defined" in caplog.text

    def test_options_propagate_returns(self):
        source = "fn f() { if (1) { return 1 } return 2 }, return f()"
        assert run(source).value == Number(1)
        assert run(source, RunOptions(propagate_returns=False)).value == Number(2)

    def test_options_max_call_depth(self):
        result = run("fn f() { return f() }, f()", RunOptions(max_call_depth=10))
        assert not result.success
        assert "maximum call depth of 10 exceeded" in result.error_message

    def test_shared_scope(self):
        """Definitions persist across runs that share a scope."""
        scope = create_global_scope()
        assert run("fn sq(n) { return n * n }", scope=scope).success
        assert run("return sq(4)", scope=scope).value == Number(16)

    def test_explicit_interpreter(self):
        interpreter = Interpreter(propagate_returns=False)
        result = run("if (1) { return 1 } return 2", interpreter=interpreter)
        assert result.value == Number(2)

    @pytest.mark.parametrize("source", [
        "(" * 5000 + "1" + ")" * 5000,
        "-" * 5000 + "1",
    ], ids=["parentheses", "negations"])
    def test_deep_nesting_fails_cleanly(self, source):
        result = run(source)
        assert not result.success
        assert isinstance(result.error, StackOverflow)
        assert result.error.code == "E207"
        assert "nested too deeply" in result.error_message

    def test_on_log_runs_before_evaluation(self, capsys):
        events = []

        def on_log(stage, text):
            events.append((stage, capsys.readouterr().out))

        result = run("print(7)", RunOptions(log_tokens=True, log_ast=True), on_log=on_log)
        assert result.success
        assert [stage for stage, _ in events] == ["tokens", "ast"]
        assert all(out == "" for _, out in events)
        assert capsys.readouterr().out == "7\n"

    def test_filename_in_message(self):
        result = run("1 +", filename="broken.thor")
        assert "broken.thor:1:" in result.error_message


class TestConfig:
    """Test run options and YAML configuration."""

    def test_defaults(self):
        config = ThorConfig()
        assert config.options == RunOptions()
        assert config.options.max_call_depth == 64
        assert config.builtins is None

    def test_default_scope(self):
        scope = create_global_scope()
        assert scope.get("PI") == Number(math.pi)
        assert scope.get("print") == BuiltInFunction("print")

    def test_load_config(self, tmp_path):
        path = tmp_path / "thor.yaml"
        path.write_text(
            "options:\n"
            "  log_ast: true\n"
            "  max_call_depth: 16\n"
            "constants:\n"
            "  E: 2.5\n"
            "builtins: [print, sqrt]\n"
        )
        config = load_config(path)
        assert config.options.log_ast is True
        assert config.options.log_tokens is False
        assert config.options.max_call_depth == 16
        assert config.constants == {"E": 2.5}
        assert config.builtins == ["print", "sqrt"]

        scope = create_global_scope(config)
        assert scope.get("E") == Number(2.5)
        assert scope.get("sqrt") == BuiltInFunction("sqrt")
        assert scope.get("abs") is None
        assert scope.get("PI") == Number(math.pi)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == ThorConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("options: [unclosed\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert exc_info.value.code == "E301"

    @pytest.mark.parametrize("data, message", [
        ([1, 2], "must be a mapping"),
        ({"extra": 1}, "unknown configuration section"),
        ({"options": {"verbose": True}}, "unknown option"),
        ({"options": {"log_ast": "yes"}}, "must be bool"),
        ({"options": {"max_call_depth": True}}, "must be int"),
        ({"options": {"max_call_depth": 0}}, "at least 1"),
        ({"constants": {"E": "two"}}, "must be a number"),
        ({"constants": {"E": False}}, "must be a number"),
        ({"builtins": "print"}, "list of names"),
    ])
    def test_invalid_config(self, data, message):
        with pytest.raises(ConfigurationError) as exc_info:
            ThorConfig.from_dict(data)
        assert message in str(exc_info.value)

    def test_unknown_builtin_in_config(self):
        config = ThorConfig(builtins=["print", "launch_rockets"])
        with pytest.raises(ConfigurationError) as exc_info:
            create_global_scope(config)
        assert "launch_rockets" in str(exc_info.value)

    def test_constant_overrides_default(self):
        scope = create_global_scope(ThorConfig(constants={"PI": 3.0}))
        assert scope.get("PI") == Number(3)


class TestCommandLine:
    """Test the thor command."""

    def test_run_file(self, tmp_path, capsys):
        script = tmp_path / "add.thor"
        script.write_text(ADD_PROGRAM)
        assert main([str(script)]) == 0
        assert capsys.readouterr().out == "5\n"

    def test_run_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("print(1 + 1)"))
        assert main([]) == 0
        assert capsys.readouterr().out == "2\n"

    def test_tokens_and_ast(self, tmp_path, capsys):
        script = tmp_path / "one.thor"
        script.write_text("x = 1")
        assert main([str(script), "--tokens", "--ast"]) == 0
        out = capsys.readouterr().out
        assert "tokens: [" in out
        assert "NUMBER(1.0)" in out
        assert "ast: x = 1" in out

    def test_renderings_printed_before_program_output(self, tmp_path, capsys):
        script = tmp_path / "show.thor"
        script.write_text("print(1)")
        assert main([str(script), "--tokens", "--ast"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("tokens: [")
        assert out.index("ast: print(1)") > out.index("tokens: [")
        assert out.endswith("\n\n1\n")

    def test_failure_exit_code(self, tmp_path, capsys):
        script = tmp_path / "bad.thor"
        script.write_text("return 1 / 0")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "division by zero" in err

    def test_missing_script(self, tmp_path, capsys):
        assert main([str(tmp_path / "nothing.thor")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_config_option(self, tmp_path, capsys):
        config = tmp_path / "thor.yaml"
        config.write_text("constants:\n  ANSWER: 42\n")
        script = tmp_path / "answer.thor"
        script.write_text("print(ANSWER)")
        assert main([str(script), "--config", str(config)]) == 0
        assert capsys.readouterr().out == "42\n"

    def test_bad_config(self, tmp_path, capsys):
        config = tmp_path / "thor.yaml"
        config.write_text("builtins: [warp_drive]\n")
        script = tmp_path / "x.thor"
        script.write_text("1")
        assert main([str(script), "--config", str(config)]) == 1
        assert "warp_drive" in capsys.readouterr().err

    def test_final_value_not_printed(self, tmp_path, capsys):
        script = tmp_path / "value.thor"
        script.write_text("return 99")
        assert main([str(script)]) == 0
        assert capsys.readouterr().out == ""
