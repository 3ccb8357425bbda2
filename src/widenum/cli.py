# src/widenum/cli.py

"""
widenum - fixed-width big integers, combinatorics and binomial fitting

usage: see widenum -h
"""

from __future__ import annotations

import argparse
import faulthandler
import sys
import textwrap
import threading
import traceback

from colorama import Fore, Style
from colorama import init as colorama_init

from widenum import __version__ as _ver
from widenum import config as CONFIG
from widenum.distribution import binomial_fit, binomial_mean
from widenum.errors import UserInputError, WideNumError
from widenum.fmt import digits_note, format_wide_float, format_wide_int, label, value
from widenum.number_theory import (
    combination,
    divisibility_theorem,
    factorial,
    gauss_sum,
    permutation,
)
from widenum.runtime import APPLY, ensure_runtime_deps
from widenum.runtime import current as _rt_current
from widenum.widefloat import FLOAT_WIDTHS
from widenum.widths import WIDTHS
from widenum.workspace import seed_workspace, workspace_dir


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    try:
        faulthandler.enable()
    except (OSError, ValueError):
        # stderr without a real file descriptor (captured or redirected in-process)
        pass

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _parse_int(text: str) -> int:
    s = text.strip().replace("_", "")
    try:
        return int(s, 0) if s.lower().lstrip("+-").startswith("0x") else int(s)
    except ValueError:
        raise UserInputError(f"Invalid input: {text!r} is not an integer.") from None


def _parse_sample(token: str):
    """Samples compare by value: ints, then floats, else the raw string."""
    t = token.strip()
    for conv in (int, float):
        try:
            return conv(t)
        except ValueError:
            continue
    return t


def _parse_samples(text: str) -> list:
    items = [t for t in text.replace(";", ",").split(",") if t.strip()]
    return [_parse_sample(t) for t in items]


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:
    epilog = textwrap.dedent("""\
    examples:
      widenum factorial 100
      widenum ncr 52 5 --width 64
      widenum divide 17 5 --max-iterations 10
      widenum pmf 1,0,1,1,0 --target 1 --trials 4
      widenum verify --n-max 40
    """)

    p = argparse.ArgumentParser(
        prog="widenum",
        description="Fixed-width big integers, combinatorics and binomial fitting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    p.add_argument("--profile", default=None, help="Profile name in <workspace>/profiles (default: 'default')")
    p.add_argument("--width", type=int, default=None, choices=WIDTHS, metavar="BITS",
                   help="Integer bit width (overrides BEHAVIOUR.DEFAULT_WIDTH)")
    p.add_argument("--full", action="store_true", help="Never abbreviate long integers")
    p.add_argument("--debug", action="store_true", help="Print internal trace info to stderr")

    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("factorial", help="n!")
    s.add_argument("n")
    s = sub.add_parser("ncr", help="combination C(n, r)")
    s.add_argument("n")
    s.add_argument("r")
    s = sub.add_parser("npr", help="permutation P(n, r)")
    s.add_argument("n")
    s.add_argument("r")
    s = sub.add_parser("gauss", help="0 + 1 + ... + n")
    s.add_argument("n")
    s = sub.add_parser("divide", help="a = q*b + r by bounded shift-subtract")
    s.add_argument("a")
    s.add_argument("b")
    s.add_argument("--max-iterations", type=int, default=None)

    for name, hlp in (("pmf", "binomial pmf from a sample set"), ("mean", "binomial mean from a sample set")):
        s = sub.add_parser(name, help=hlp)
        s.add_argument("samples", help="comma-separated observations, e.g. 1,0,1,1,0")
        s.add_argument("--target", required=True, help="value counted as a success")
        s.add_argument("--trials", required=True, help="trial count n")
        s.add_argument("--float-width", type=int, default=None, choices=FLOAT_WIDTHS, metavar="BITS",
                       help="probability float width (overrides DISTRIBUTION.FLOAT_WIDTH)")
        if name == "pmf":
            s.add_argument("--workers", type=int, default=None)

    s = sub.add_parser("verify", help="cross-check against sympy/gmpy2")
    s.add_argument("--n-max", type=int, default=30)

    s = sub.add_parser("init", help="seed the workspace with packaged profiles")
    s.add_argument("--overwrite", action="store_true")
    sub.add_parser("where", help="show workspace path and profiles")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except WideNumError as e:
        _print_user_error(f"{e.__class__.__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _main_impl(argv=None) -> int:
    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        ws, copied = seed_workspace(overwrite=args.overwrite)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    try:
        settings = CONFIG.load_settings(args.profile)
    except FileNotFoundError as e:
        raise UserInputError(str(e)) from None
    APPLY(settings)

    rt = _rt_current()
    if args.debug:
        rt.debug = True
    _install_loud_error_handlers(rt.debug)
    if args.width is not None:
        rt.settings.setdefault("BEHAVIOUR", {})["DEFAULT_WIDTH"] = args.width

    if rt.debug:
        print(f"[debug] profile={rt.profile_name} workspace={workspace_dir()}", file=sys.stderr)

    cmd = args.command
    if cmd == "where":
        print(f"{label('Workspace:')} {workspace_dir()}")
        for name, desc in CONFIG.list_profiles_with_descriptions():
            print(f"  {value(name)}  {desc}")
        return 0

    if cmd == "verify":
        if not ensure_runtime_deps(strict=True):
            return 1
        from widenum.verify import cross_check  # noqa: PLC0415  (sympy/gmpy2 only needed here)

        bad = cross_check(args.n_max)
        if bad:
            for line in bad:
                print(f"{Fore.RED}MISMATCH{Style.RESET_ALL} {line}")
            return 1
        print(f"{Fore.GREEN}OK{Style.RESET_ALL} all checks up to n={args.n_max}")
        return 0

    if cmd in ("factorial", "gauss"):
        n = _parse_int(args.n)
        res = factorial(n) if cmd == "factorial" else gauss_sum(n)
        sym = f"{n}!" if cmd == "factorial" else f"gauss_sum({n})"
        print(f"{label(sym)} = {value(format_wide_int(res, full=args.full))} {digits_note(res)}")
        return 0

    if cmd in ("ncr", "npr"):
        n, r = _parse_int(args.n), _parse_int(args.r)
        res = combination(n, r) if cmd == "ncr" else permutation(n, r)
        sym = f"C({n}, {r})" if cmd == "ncr" else f"P({n}, {r})"
        print(f"{label(sym)} = {value(format_wide_int(res, full=args.full))} {digits_note(res)}")
        return 0

    if cmd == "divide":
        a, b = _parse_int(args.a), _parse_int(args.b)
        q, r = divisibility_theorem(a, b, args.max_iterations)
        print(f"{label('q')} = {value(format_wide_int(q, full=args.full))}")
        print(f"{label('r')} = {value(format_wide_int(r, full=args.full))}")
        return 0

    samples = _parse_samples(args.samples)
    target = _parse_sample(args.target)
    trials = _parse_int(args.trials)
    if cmd == "mean":
        m = binomial_mean(samples, target, trials, width=args.float_width)
        print(f"{label('mean')} = {value(format_wide_float(m))}")
        return 0

    fit = binomial_fit(samples, target, trials, width=args.float_width, workers=args.workers)
    print(f"{label('p')} = {value(format_wide_float(fit.p))}")
    for k, pk in enumerate(fit.pmf):
        print(f"  P({k:>{len(str(trials))}}) = {format_wide_float(pk)}")
    print(f"{label('mean')} = {value(format_wide_float(fit.mean))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
