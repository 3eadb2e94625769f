import io

import pytest

from shorthand import VirtualMachine, Config, FileReadError, ShellExecError
from shorthand.shorthand_markdown import markdown_to_html

TESTME = """# testme

A nimble webserver that speaks JSON.
"""

TEST_MD = """# Test

## H2

Some *text*.

## Another H2
"""


@pytest.fixture
def testdata(tmp_path):
    (tmp_path / "testme.md").write_text(TESTME, encoding="utf-8")
    (tmp_path / "test.md").write_text(TEST_MD, encoding="utf-8")
    (tmp_path / "greeting.txt").write_text("Hello @name!", encoding="utf-8")
    return tmp_path


# --- files ---

def test_include_file(testdata):
    vm = VirtualMachine()
    assert vm.eval(f"@TESTME :=<: {testdata / 'testme.md'}", 1) == ""
    result = vm.eval("@TESTME", 2)
    assert result == TESTME
    assert "A nimble webserver" in result
    assert "JSON" in result


def test_include_is_relative_to_base_dir(testdata):
    vm = VirtualMachine(Config(base_dir=str(testdata)))
    vm.eval("@TESTME :import-text: testme.md", 1)
    assert vm.expand("@TESTME") == TESTME


def test_include_expansion(testdata):
    vm = VirtualMachine(Config(base_dir=str(testdata)))
    vm.eval("@name :=: World", 1)
    vm.eval("@there :{<: greeting.txt", 2)
    assert vm.expand("@there") == "Hello World!"


def test_include_missing_file_raises(tmp_path):
    vm = VirtualMachine(Config(base_dir=str(tmp_path)))
    for op in (" :=<: ", " :{<: ", " :[<: ", " :{[<: ", " :}<: "):
        with pytest.raises(FileReadError) as info:
            vm.eval(f"@x{op}nope.txt", 1)
        assert info.value.path == "nope.txt"
        assert "nope.txt" in str(info.value)
    assert len(vm.symbols) == 0


# --- shell ---

def test_shell_capture():
    vm = VirtualMachine()
    assert vm.eval("E :!: echo -n hi", 1) == ""
    assert vm.expand("E") == "hi"


def test_shell_keeps_trailing_newline():
    vm = VirtualMachine()
    vm.eval("@ECHO :bash: echo 'Hello World!'", 1)
    assert vm.eval("@ECHO", 2) == "Hello World!\n"


def test_expand_shell():
    vm = VirtualMachine()
    vm.eval("@who :=: Max", 1)
    vm.eval("@hi :{!: echo -n 'Hello @who'", 2)
    assert vm.expand("@hi") == "Hello Max"


def test_shell_failure_raises():
    vm = VirtualMachine()
    with pytest.raises(ShellExecError) as info:
        vm.eval("@bad :!: exit 3", 1)
    assert info.value.returncode == 3
    assert "@bad" not in vm.symbols


def test_shell_spawn_failure_raises():
    vm = VirtualMachine(Config(shell="/no/such/shell"))
    with pytest.raises(ShellExecError) as info:
        vm.eval("@x :!: echo hi", 1)
    assert isinstance(info.value.cause, OSError)


def test_shell_timeout():
    vm = VirtualMachine(Config(shell_timeout=0.2))
    with pytest.raises(ShellExecError):
        vm.eval("@slow :!: sleep 5", 1)


# --- markdown ---

def test_assign_markdown():
    vm = VirtualMachine()
    vm.eval("M :[: **strong**", 1)
    result = vm.expand("M")
    assert result == markdown_to_html("**strong**").rstrip()
    assert "<strong>strong</strong>" in result


def test_assign_markdown_link():
    vm = VirtualMachine()
    vm.eval("@test :markdown: [my link](http://example.org)", 1)
    assert vm.expand("@test") == markdown_to_html("[my link](http://example.org)").rstrip()


def test_expand_markdown():
    vm = VirtualMachine()
    vm.eval("@link :=: my link", 1)
    vm.eval("@url :=: http://example.com", 2)
    vm.eval("@html :{[: [@link](@url)", 3)
    assert vm.expand("@html") == '<p><a href="http://example.com">my link</a></p>'


def test_include_markdown(testdata):
    vm = VirtualMachine(Config(base_dir=str(testdata)))
    vm.eval("@page :[<: test.md", 1)
    result = vm.expand("@page")
    assert "<h2>Another H2</h2>" in result
    assert result == result.rstrip()


def test_include_expand_markdown(testdata):
    vm = VirtualMachine(Config(base_dir=str(testdata)))
    vm.eval("H2 :=: heading two element", 1)
    assert vm.expand("H2") == "heading two element"
    vm.eval("@page :{[<: test.md", 2)
    assert "<h2>Another heading two element</h2>" in vm.expand("@page")


def test_undecodable_shell_output_raises():
    vm = VirtualMachine()
    with pytest.raises(ShellExecError) as info:
        vm.eval("B :!: printf '\\377'", 1)
    assert isinstance(info.value.cause, UnicodeDecodeError)
    assert "B" not in vm.symbols


def test_undecodable_shell_output_does_not_stop_run():
    out, err = io.StringIO(), io.StringIO()
    vm = VirtualMachine(stdout=out, stderr=err)
    count = vm.run(io.StringIO("B :!: printf '\\377'\nA :=: hi\nsay A\n"))
    assert count == 3
    assert out.getvalue() == "say hi\n"
    assert err.getvalue().startswith("ERROR (1): ")


def test_filename_with_nul_byte_does_not_stop_run():
    out, err = io.StringIO(), io.StringIO()
    vm = VirtualMachine(stdout=out, stderr=err)
    count = vm.run(io.StringIO("B :=<: a\x00b\nC :=: c\nC :>: x\x00y\nA :=: hi\nsay A\n"))
    assert count == 5
    assert out.getvalue() == "say hi\n"
    assert err.getvalue().count("ERROR") == 2
    assert "ERROR (1): " in err.getvalue()
    assert "ERROR (3): " in err.getvalue()
