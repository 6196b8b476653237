import argparse
import json
import logging
import math
import sys

from .config import PricingConfig
from .core import ContractTerms, OptionKind
from .errors import PricingError
from .pricing import price_option
from .risk import break_even, implied_volatility, max_profit_loss, probability_of_profit


def _kind(s: str) -> OptionKind:
    try:
        return OptionKind.parse(s)
    except PricingError:
        raise argparse.ArgumentTypeError("kind must be 'call' or 'put'") from None


def _read_series(args) -> list:
    values = list(args.values or [])
    if getattr(args, "file", None):
        with open(args.file) as fh:
            values.extend(float(line) for line in fh if line.strip())
    return values


def _fmt(x: float) -> str:
    return "inf" if math.isinf(x) else f"{x:.6f}"


def cmd_price(args):
    cfg = PricingConfig.from_env().with_overrides(
        simulations=args.simulations,
        n_workers=args.workers,
        deadline=args.deadline,
        antithetic=True if args.antithetic else None,
        control_variate=True if args.control_variate else None,
    )
    terms = ContractTerms(
        kind=args.kind, strike=args.strike, expiry_days=args.days,
        underlying=args.underlying, volatility=args.vol,
        risk_free_rate=args.rate,
    )
    res = price_option(terms, seed=args.seed, config=cfg)
    if args.json:
        print(json.dumps(res.as_dict(), indent=2))
        return
    g = res.greeks
    print(f"premium   {res.premium:.6f}  (stderr {res.standard_error:.6f}, {res.simulations} paths)")
    print(f"vol used  {res.implied_volatility:.4f}")
    print(f"delta {g.delta}  gamma {g.gamma}  theta {g.theta}  vega {g.vega}")


def cmd_vol(args):
    print(f"{implied_volatility(_read_series(args)):.6f}")


def cmd_stats(args):
    series = _read_series(args)
    pl = max_profit_loss(args.kind, args.strike, args.premium)
    print(f"break-even             {_fmt(break_even(args.kind, args.strike, args.premium))}")
    print(f"max profit             {_fmt(pl.max_profit)}")
    print(f"max loss               {_fmt(pl.max_loss)}")
    pop = probability_of_profit(args.kind, args.strike, args.premium, series)
    print(f"probability of profit  {pop:.4f}")


def main(argv=None):
    p = argparse.ArgumentParser(prog="wxpricer", description="Weather option pricing CLI")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Price
    p_px = sub.add_parser("price", help="Monte Carlo premium + Greeks")
    p_px.add_argument("--kind", type=_kind, default=OptionKind.CALL, help="call|put")
    p_px.add_argument("--strike", type=float, required=True)
    p_px.add_argument("--days", type=int, required=True, help="days to expiry")
    p_px.add_argument("--underlying", type=float, required=True, help="current index level")
    p_px.add_argument("--vol", type=float, required=True, help="annualized volatility")
    p_px.add_argument("--rate", type=float, default=None, help="cont. risk-free")
    p_px.add_argument("--simulations", type=int, default=None)
    p_px.add_argument("--seed", type=int, default=None)
    p_px.add_argument("--antithetic", action="store_true")
    p_px.add_argument("--control-variate", dest="control_variate", action="store_true")
    p_px.add_argument("--workers", type=int, default=None)
    p_px.add_argument("--deadline", type=float, default=None, help="seconds")
    p_px.add_argument("--json", action="store_true")
    p_px.set_defaults(func=cmd_price)

    # Volatility from history
    p_vol = sub.add_parser("vol", help="volatility from historical readings")
    p_vol.add_argument("values", nargs="*", type=float)
    p_vol.add_argument("--file", help="one reading per line")
    p_vol.set_defaults(func=cmd_vol)

    # Break-even / P&L / probability of profit
    p_st = sub.add_parser("stats", help="break-even, max P/L, probability of profit")
    p_st.add_argument("--kind", type=_kind, default=OptionKind.CALL, help="call|put")
    p_st.add_argument("--strike", type=float, required=True)
    p_st.add_argument("--premium", type=float, required=True)
    p_st.add_argument("--series", dest="values", nargs="*", type=float, default=[])
    p_st.add_argument("--file", help="one reading per line")
    p_st.set_defaults(func=cmd_stats)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except (PricingError, ValueError, OSError) as exc:
        print(f"wxpricer: error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
