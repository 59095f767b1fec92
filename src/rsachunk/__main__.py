"""The Command Line Interface for the utility, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface) that prompts for whatever the command
line left out, unless non-interactive mode is requested.

Typical usage example:

    rsachunk encrypt -p key.pub --message "Hi there!"
    OR
    python -m rsachunk
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import base64
import binascii
import logging
import pathlib
import sys
import typing

import rsachunk
from rsachunk import der
from rsachunk import pem

_logger = logging.getLogger("rsachunk")


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in RSA Chunk.",
            choices=["encrypt", "decrypt", "strip"],
        ),
    "encrypt":
        HelpData("Chunked encryption utility."),
    "decrypt":
        HelpData("Chunked decryption utility."),
    "strip":
        HelpData("Public key X509 header stripping utility."),
    "public_key":
        HelpData(
            description="Location of the PEM public key file.",
            format=pathlib.Path,
        ),
    "private_key":
        HelpData(
            description="Location of the PEM private key file.",
            format=pathlib.Path,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "encoding":
        HelpData(description="Payload encoding.", choices=["utf-8", "utf-16", "ascii"], advanced=True, default="utf-8"),
}

needs = {
    "encrypt": ("public_key", "message", "encoding"),
    "decrypt": ("private_key", "message", "encoding"),
    "strip": ("public_key",),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-P",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", type=help_dict["message"].format, help=help_dict["message"].description)
encp = argparse.ArgumentParser(add_help=False)
encp.add_argument("--encoding", "-e", choices=help_dict["encoding"].choices, help=help_dict["encoding"].description)
corep = argparse.ArgumentParser(prog="rsachunk")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsachunk.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--log-level",
                   choices=["debug", "info", "warning", "error"],
                   default="warning",
                   help="Logging verbosity, written to stderr")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

encrypt = commands.add_parser("encrypt", parents=[pubkey, payloads, encp], help=help_dict["encrypt"].description)
decrypt = commands.add_parser("decrypt", parents=[privkey, payloads, encp], help=help_dict["decrypt"].description)
strip = commands.add_parser("strip", parents=[pubkey], help=help_dict["strip"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        ch = input(f"{arg}: ")
        if ch in helper_data.choices:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def check_message(mess: str, enc: str) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding=enc) as f:
            mess = f.read()
    return mess


def run(args: argparse.Namespace, pspr: typing.Callable) -> None:
    """Executes a fully specified subcommand."""
    match args.subcommand:
        case "encrypt":
            args.message = check_message(args.message, args.encoding)
            with open(args.public_key, "r", encoding="utf-8") as f:
                key = f.read()
            ciph = rsachunk.encrypt_with_public_key_pem(args.message.encode(args.encoding), key)
            pspr("Ciphertext:")
            print(base64.b64encode(ciph).decode("ascii"))
        case "decrypt":
            args.message = check_message(args.message, "ascii")
            with open(args.private_key, "r", encoding="utf-8") as f:
                key = f.read()
            try:
                ciph = base64.b64decode(args.message.strip(), validate=True)
            except binascii.Error as exc:
                raise rsachunk.FormatError("Ciphertext is not valid base64") from exc
            clear = rsachunk.decrypt_with_private_key_pem(ciph, key)
            pspr("Cleartext:")
            print(clear.decode(args.encoding))
        case "strip":
            data = pem.read_pem(args.public_key)
            stripped = der.strip_public_key_header(data)
            if stripped is data:
                pspr("Public key is already headerless.")
            else:
                pspr(f"Stripped {len(data) - len(stripped)} byte X509 header.")
            print(pem.encode_pem(stripped, "RSA PUBLIC KEY"), end="")


def main(argv: list[str] | None = None):
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to RSA Chunk!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    try:
        run(args, pspr)
    except rsachunk.RSAChunkError as exc:
        _logger.debug("Command %s failed", args.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    pspr("Thank you for using RSA Chunk!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
