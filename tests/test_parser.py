import pytest

from pubdatahub.command.parser import (
    Command,
    CommandSpec,
    FlagSpec,
    ParseError,
    Parser,
    Token,
    UnknownCommandError,
)


@pytest.fixture
def parser():
    p = Parser()
    p.register_command(
        CommandSpec(
            name="test",
            min_args=1,
            max_args=3,
            flags={
                "verbose": FlagSpec(type="bool", short="v"),
                "count": FlagSpec(type="int", short="c"),
                "output": FlagSpec(type="string", short="o"),
                "rate": FlagSpec(type="float"),
            },
        )
    )
    return p


@pytest.mark.parametrize(
    "text, args, flags",
    [
        ("test arg1 arg2", ["arg1", "arg2"], {}),
        ("test arg1 --verbose", ["arg1"], {"verbose": True}),
        ("test arg1 -v", ["arg1"], {"verbose": True}),
        ("test arg1 --output file.txt", ["arg1"], {"output": "file.txt"}),
        ("test arg1 --count 42", ["arg1"], {"count": 42}),
        ("test arg1 --rate 3.14", ["arg1"], {"rate": 3.14}),
        ("test \"quoted arg\" 'single quoted'", ["quoted arg", "single quoted"], {}),
        ("test arg1 -vc 10", ["arg1"], {"verbose": True, "count": 10}),
    ],
)
def test_parse_valid(parser, text, args, flags):
    command = parser.parse(text)
    assert command.name == "test"
    assert command.args == args
    assert command.flags == flags
    assert command.raw_input == text


@pytest.mark.parametrize(
    "text",
    [
        "test",
        "test arg1 arg2 arg3 arg4",
        "unknown arg1",
        "test arg1 --unknown",
        'test "unterminated',
    ],
)
def test_parse_errors(parser, text):
    with pytest.raises(ParseError):
        parser.parse(text)


def test_unknown_command_carries_partial_command(parser):
    with pytest.raises(UnknownCommandError) as info:
        parser.parse("unknown arg1")
    assert str(info.value) == "unknown command: unknown"
    assert info.value.command.name == "unknown"


def test_empty_and_blank_input(parser):
    with pytest.raises(ParseError, match="empty command"):
        parser.parse("   ")
    with pytest.raises(ParseError, match="no command found"):
        parser.parse('""')


def test_unterminated_quote_message(parser):
    with pytest.raises(ParseError) as info:
        parser.parse('test "unterminated')
    assert str(info.value) == "tokenization error: unterminated quote at position 5"


def test_argument_count_messages(parser):
    with pytest.raises(ParseError) as few:
        parser.parse("test")
    assert str(few.value) == "command test requires at least 1 arguments, got 0"
    with pytest.raises(ParseError) as many:
        parser.parse("test a b c d")
    assert str(many.value) == "command test accepts at most 3 arguments, got 4"


def test_flag_value_errors(parser):
    with pytest.raises(ParseError, match="flag --output requires a string value"):
        parser.parse("test arg1 --output")
    with pytest.raises(ParseError, match="requires an integer value, got: abc"):
        parser.parse("test arg1 --count abc")
    with pytest.raises(ParseError, match="requires a float value, got: x"):
        parser.parse("test arg1 --rate x")
    with pytest.raises(ParseError, match="flag --count requires an integer value"):
        parser.parse("test arg1 --count --verbose")


def test_short_flag_errors(parser):
    with pytest.raises(ParseError) as unknown:
        parser.parse("test arg1 -vx")
    assert str(unknown.value) == "unknown flag: -x at position 12"
    with pytest.raises(ParseError) as combined:
        parser.parse("test arg1 -cv 1")
    assert str(combined.value) == "non-boolean flag -c cannot be combined at position 11"


def test_unknown_long_flag_message(parser):
    with pytest.raises(ParseError) as info:
        parser.parse("test arg1 --unknown")
    assert str(info.value) == "unknown flag: --unknown"


@pytest.mark.parametrize(
    "text, expected",
    [
        (
            "cmd arg1 arg2",
            [Token("arg", "cmd", 0), Token("arg", "arg1", 4), Token("arg", "arg2", 9)],
        ),
        (
            "cmd --long -s",
            [Token("arg", "cmd", 0), Token("long_flag", "--long", 4), Token("short_flag", "-s", 11)],
        ),
        (
            "cmd \"quoted arg\" 'single'",
            [Token("arg", "cmd", 0), Token("arg", "quoted arg", 4), Token("arg", "single", 17)],
        ),
        (
            'cmd "escaped \\"quote\\""',
            [Token("arg", "cmd", 0), Token("arg", 'escaped "quote"', 4)],
        ),
    ],
)
def test_tokenize(text, expected):
    assert Parser().tokenize(text) == expected


def test_tokenize_unterminated_quote():
    with pytest.raises(ParseError, match="unterminated quote"):
        Parser().tokenize('cmd "unterminated')


@pytest.fixture
def completion_parser():
    p = Parser()
    for name, description in [
        ("download", "Download data"),
        ("delete", "Delete data"),
        ("config", "Configure system"),
    ]:
        p.register_command(CommandSpec(name=name, description=description))
    return p


@pytest.mark.parametrize(
    "partial, expected",
    [
        ("", ["download", "delete", "config"]),
        ("d", ["download", "delete"]),
        ("dow", ["download"]),
        ("xyz", []),
    ],
)
def test_get_completions(completion_parser, partial, expected):
    assert sorted(completion_parser.get_completions(partial)) == sorted(expected)


@pytest.fixture
def required_parser():
    p = Parser()
    p.register_command(
        CommandSpec(
            name="test",
            min_args=1,
            max_args=2,
            flags={
                "required": FlagSpec(type="string", required=True),
                "optional": FlagSpec(type="int", default=42),
            },
        )
    )
    return p


def test_required_flag_present(required_parser):
    command = required_parser.parse("test arg1 --required value")
    assert command.flags == {"optional": 42, "required": "value"}


def test_required_flag_missing(required_parser):
    with pytest.raises(ParseError, match="required flag --required is missing"):
        required_parser.parse("test arg1")


def test_default_flag_overridden(required_parser):
    command = required_parser.parse("test arg1 --required value --optional 100")
    assert command.flags["optional"] == 100


def test_aliases_parse_but_do_not_complete():
    p = Parser()
    p.register_command(CommandSpec(name="exit", aliases=["quit", "q"], max_args=0))
    assert p.parse("quit").name == "quit"
    assert p.get_completions("") == ["exit"]
    assert p.get_command_specs()["q"].name == "exit"


def test_register_errors():
    p = Parser()
    with pytest.raises(ValueError, match="cannot be empty"):
        p.register_command(CommandSpec(name=""))
    p.register_command(CommandSpec(name="help", aliases=["h"]))
    with pytest.raises(ValueError, match="already registered"):
        p.register_command(CommandSpec(name="help"))
    with pytest.raises(ValueError, match="alias h conflicts"):
        p.register_command(CommandSpec(name="hello", aliases=["h"]))
    assert "hello" not in p.get_command_specs()


def test_get_command_specs_returns_copy(parser):
    specs = parser.get_command_specs()
    specs.pop("test")
    assert "test" in parser.get_command_specs()


def test_validate(parser):
    parser.validate(Command(name="test", args=["a"], flags={"count": 3, "rate": 1.5}))
    with pytest.raises(UnknownCommandError):
        parser.validate(Command(name="nope"))
    with pytest.raises(ParseError, match="requires at least 1 arguments"):
        parser.validate(Command(name="test"))
    with pytest.raises(ParseError, match="unknown flag: other"):
        parser.validate(Command(name="test", args=["a"], flags={"other": 1}))
    with pytest.raises(ParseError, match="expected int, got bool"):
        parser.validate(Command(name="test", args=["a"], flags={"count": True}))
    with pytest.raises(ParseError, match="expected float, got str"):
        parser.validate(Command(name="test", args=["a"], flags={"rate": "1"}))


def test_get_command_help():
    p = Parser()
    p.register_command(
        CommandSpec(
            name="x",
            description="d",
            usage="x <a>",
            category="system",
            aliases=["y"],
            flags={
                "count": FlagSpec(type="int", short="c", description="Count", default=5),
                "name": FlagSpec(type="string", description="Name", required=True),
                "all": FlagSpec(type="bool", description="All", default=True),
            },
            examples=["x 1"],
        )
    )
    expected = (
        "Command: x\n"
        "Description: d\n"
        "Usage: x <a>\n"
        "Category: system\n"
        "Aliases: y\n"
        "\n"
        "Flags:\n"
        "  --count, -c: Count (default: 5)\n"
        "  --name: Name (required)\n"
        "  --all: All (default: true)\n"
        "\n"
        "Examples:\n"
        "  x 1\n"
    )
    assert p.get_command_help("x") == expected
    assert p.get_command_help("y") == expected


def test_get_command_help_minimal_and_unknown():
    p = Parser()
    p.register_command(CommandSpec(name="z", description="zed"))
    assert p.get_command_help("z") == "Command: z\nDescription: zed\n"
    with pytest.raises(UnknownCommandError, match="unknown command: w"):
        p.get_command_help("w")