#!/usr/bin/env python3
"""Batch-price a book of weather options.

Usage
-----
    python scripts/price_book.py --input book.csv --output prices.csv
    python scripts/price_book.py --input book.csv --output prices.json --stats

Input CSV format
----------------
    id,kind,strike,expiry_days,underlying,volatility,risk_free_rate,history
    1,call,15,30,12,0.30,0.05,
    2,put,15,14,16,,0.05,11.2 14.0 9.8 13.1 15.5 12.2 10.9 16.4 14.8 13.3

A blank ``volatility`` is estimated from ``history`` (space-separated daily
readings).  ``risk_free_rate`` is optional.

Output
------
    CSV or JSON with columns: id, premium, stderr, vol, delta, gamma, theta,
    vega and, with ``--stats``, break_even, max_profit, max_loss, pop.
    Rows that cannot be priced carry an ``error`` column instead.
"""

from __future__ import annotations
import argparse
import csv
import json
import logging
import math
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from wxpricer import (
    ContractTerms, PricingConfig, PricingError,
    price_option, implied_volatility, break_even, max_profit_loss,
    probability_of_profit,
)

logger = logging.getLogger("price_book")


def _history(row: dict) -> list[float]:
    raw = (row.get("history") or "").strip()
    return [float(x) for x in raw.split()] if raw else []


def _json_ready(value):
    # JSON has no infinity; write "inf" like the CLI does
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


def _price_row(row: dict, cfg: PricingConfig, seed: int, with_stats: bool) -> dict:
    """Price a single book row and return result dict."""
    rid = row.get("id", "")
    history = _history(row)

    vol_raw = (row.get("volatility") or "").strip()
    vol = float(vol_raw) if vol_raw else implied_volatility(
        history, default=cfg.default_volatility, floor=cfg.vol_floor, cap=cfg.vol_cap,
    )
    rate_raw = (row.get("risk_free_rate") or "").strip()

    terms = ContractTerms(
        kind=row["kind"],
        strike=float(row["strike"]),
        expiry_days=int(row["expiry_days"]),
        underlying=float(row["underlying"]),
        volatility=vol,
        risk_free_rate=float(rate_raw) if rate_raw else None,
    )
    res = price_option(terms, seed=seed, config=cfg)

    result = {
        "id": rid,
        "premium": res.premium,
        "stderr": res.standard_error,
        "vol": res.implied_volatility,
        **res.greeks.as_dict(),
    }
    if with_stats:
        pl = max_profit_loss(terms.kind, terms.strike, res.premium)
        result["break_even"] = break_even(terms.kind, terms.strike, res.premium)
        result["max_profit"] = pl.max_profit
        result["max_loss"] = pl.max_loss
        result["pop"] = probability_of_profit(terms.kind, terms.strike, res.premium, history)
    return result


def main():
    parser = argparse.ArgumentParser(
        description="Batch-price a book of weather options."
    )
    parser.add_argument("--input", required=True, help="Path to book CSV")
    parser.add_argument("--output", required=True, help="Output path (.csv or .json)")
    parser.add_argument("--stats", action="store_true",
                        help="Add break-even, max P/L and probability of profit")
    parser.add_argument("--seed", type=int, default=1)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    cfg = PricingConfig.from_env()

    # Read book
    with open(args.input, newline="") as f:
        rows = list(csv.DictReader(f))

    logger.info("Pricing %d contracts...", len(rows))

    results = []
    for i, row in enumerate(rows):
        try:
            results.append(_price_row(row, cfg, args.seed, args.stats))
        except (PricingError, ValueError, KeyError) as e:
            logger.error("Row %d (id=%s): %s", i, row.get("id", "?"), e)
            results.append({"id": row.get("id", ""), "premium": None, "error": str(e)})

    # Write output
    output_path = Path(args.output)
    if output_path.suffix == ".json":
        with open(output_path, "w") as f:
            rows_out = [{k: _json_ready(v) for k, v in r.items()} for r in results]
            json.dump(rows_out, f, indent=2, default=str, allow_nan=False)
    else:
        if not results:
            logger.warning("No results to write.")
            return
        fieldnames = list(results[0].keys())
        for r in results:
            for k in r:
                if k not in fieldnames:
                    fieldnames.append(k)
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(results)

    priced = [r for r in results if r.get("premium") is not None]
    logger.info("Results written to %s (priced %d, failed %d)",
                args.output, len(priced), len(results) - len(priced))


if __name__ == "__main__":
    main()
