"""Tests for lemonade compatibility flag handling."""

import pytest

from limeade.cli.arg_parser import parse_args
from limeade.cli.legacy import (
    LegacyOptions,
    build_server_url,
    reject_unsupported_argv,
    server_bind_address,
)
from limeade.core.errors import UnsupportedLegacyOptionError


class TestParsing:
    """Legacy flags are accepted on either side of the subcommand."""

    def test_flags_before_subcommand(self):
        args = parse_args(["--port", "9000", "--host", "desk", "paste"])
        legacy = LegacyOptions.from_namespace(args)

        assert args.command == "paste"
        assert legacy.port == 9000
        assert legacy.host == "desk"

    def test_flags_after_subcommand(self):
        args = parse_args(["copy", "hello", "--port", "9000", "--log-level", "0"])
        legacy = LegacyOptions.from_namespace(args)

        assert args.text == "hello"
        assert legacy.port == 9000
        assert legacy.log_level == 0

    def test_absent_flags_are_none(self):
        legacy = LegacyOptions.from_namespace(parse_args(["paste"]))
        assert legacy == LegacyOptions()

    def test_allow_may_repeat(self):
        args = parse_args(["server", "--allow", "10.0.0.0/8", "--allow", "::1/128"])
        assert LegacyOptions.from_namespace(args).allow == ["10.0.0.0/8", "::1/128"]

    def test_trans_flags_take_optional_value(self):
        args = parse_args(["--trans-loopback=false", "paste", "--trans-localfile"])
        legacy = LegacyOptions.from_namespace(args)

        assert legacy.trans_loopback == "false"
        assert legacy.trans_localfile == "true"


class TestCheckSupported:
    """Tests for rejecting flags with no equivalent."""

    def test_no_trans_flags_passes(self):
        LegacyOptions(port=1, allow=["x"], line_ending="lf").check_supported()

    def test_trans_loopback_rejected(self):
        with pytest.raises(UnsupportedLegacyOptionError, match="--trans-loopback"):
            LegacyOptions(trans_loopback="true").check_supported()

    def test_trans_localfile_rejected_even_when_false(self):
        """Supplying the flag at all is an error, whatever its value."""
        with pytest.raises(UnsupportedLegacyOptionError, match="--trans-localfile"):
            LegacyOptions(trans_localfile="false").check_supported()


class TestBuildServerUrl:
    """Tests for mapping --server, --host and --port onto a URL."""

    def test_host_and_port(self):
        legacy = LegacyOptions(host="desk", port=9000)
        assert build_server_url("ignored:1", legacy) == "http://desk:9000"

    def test_host_only_uses_default_port(self):
        assert build_server_url("ignored:1", LegacyOptions(host="desk")) == "http://desk:2490"

    def test_port_only_uses_localhost(self):
        assert build_server_url("ignored:1", LegacyOptions(port=9000)) == "http://localhost:9000"

    def test_server_without_scheme(self):
        assert build_server_url("desk:2490", LegacyOptions()) == "http://desk:2490"

    def test_server_with_scheme(self):
        assert build_server_url("https://desk", LegacyOptions()) == "https://desk"


class TestServerBindAddress:
    """Tests for the legacy --port override of the bind address."""

    def test_no_override(self):
        assert server_bind_address("127.0.0.1:2490", LegacyOptions()) == "127.0.0.1:2490"

    def test_port_overrides_addr(self):
        assert server_bind_address("127.0.0.1:2490", LegacyOptions(port=9000)) == ":9000"


class TestRejectUnsupportedArgv:
    """Tests for scanning the raw command line for --trans-* flags."""

    @pytest.mark.parametrize(
        ("argv", "flag"),
        [
            (["--trans-loopback", "paste"], "--trans-loopback"),
            (["--trans-localfile", "copy", "hi"], "--trans-localfile"),
            (["paste", "--trans-loopback=false"], "--trans-loopback"),
            (["--trans-loop", "server"], "--trans-loopback"),
        ],
    )
    def test_flag_found_in_any_position(self, argv, flag):
        with pytest.raises(UnsupportedLegacyOptionError) as exc_info:
            reject_unsupported_argv(argv)
        assert exc_info.value.flag == flag

    def test_other_flags_pass(self):
        reject_unsupported_argv(["--port", "9000", "--allow", "0.0.0.0/0", "paste"])

    def test_literal_after_double_dash_passes(self):
        """Text after "--" is copied verbatim, not parsed as a flag."""
        reject_unsupported_argv(["copy", "--", "--trans-loopback"])
