# experiments.py
# Huffman code table construction: linear-scan list vs heap ordering

"""
Experiment runner: WeightedNodeList (linear-scan insertion) vs HeapNodeQueue

Runs repeated experiments over synthetic datasets and records how long each
node ordering takes to build the code table, how well the table compresses,
and whether both orderings produce the same table

Outputs (in --outdir):
  - metrics.csv     (raw row per run per strategy)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 256 --exp2_max_alphabet 8192
  python experiments.py --outdir results --runs 5 --exp1_generators uniform256,zipf128,english_like

Notes:
  Bytes datasets use byte values as symbols, text datasets use characters.
  Bit strings are packed MSB-first only to measure the compressed size.
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple, Union

import matplotlib.pyplot as plt

import codec
import huffman as huff

STRATEGIES = ("list", "heap")

Dataset = Union[bytes, str]


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def original_size_bytes(data: Dataset) -> int:
    if isinstance(data, str):
        return len(data.encode("utf-8"))
    return len(data)

def restore(symbols: List, like: Dataset) -> Dataset:
    # decoded symbol list back into the type of the original dataset
    if isinstance(like, str):
        return "".join(symbols)
    return bytes(symbols)


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """
    Packs a '0'/'1' string into bytes, most significant bit first
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bits:
        acc = (acc << 1) | (1 if ch == '1' else 0)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc & 0xFF)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        acc = acc << pad_bits
        out.append(acc & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    if not packed:
        return ""
    bits = "".join(format(byte, "08b") for byte in packed)
    return bits[:len(bits) - pad_bits]


# Synthetic dataset generators

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: Sequence[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    other_symbols = [i for i in range(256) if i != dominant]
    out = bytearray()
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(other_symbols))
    return bytes(out)

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return bytes(_sample_cdf(rng, cdf) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = _cdf(weights)
    return "".join(chars[_sample_cdf(rng, cdf)] for _ in range(size))

def gen_unicode_zipf(size: int, alphabet: int = 1024, s: float = 1.1, seed: int = 0) -> str:
    # CJK block, one character per symbol, so alphabets can go past 256
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return "".join(chr(0x4E00 + _sample_cdf(rng, cdf)) for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], Dataset]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform128": lambda size, seed: gen_uniform(size, alphabet=128, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "unicode1024": lambda size, seed: gen_unicode_zipf(size, alphabet=1024, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, Dataset]:
    """
    Unknown dataset names fall back to uniform256 (renamed so the rows show it)
    instead of stopping the whole run
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform256", gen_uniform(size, alphabet=256, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    input_size: int  # symbols
    run_id: int
    strategy: str  # "list" or "heap"
    unique_symbols: int

    build_table_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    compressed_bytes: int
    pad_bits: int
    compression_ratio: float

    avg_code_length: float
    entropy_bits: float

    tables_match: int  # 1 if the table equals the reference ("list") table
    correctness_ok: int  # 1 or 0


def run_one(data: Dataset, strategy: str, reference: Dict = None) -> MetricRow:
    if strategy not in STRATEGIES:
        raise ValueError(f"strategy must be one of {STRATEGIES}")

    # table build (frequency count + tree + code derivation)
    t0 = now_ns()
    code_map = huff.build_code_table(data, strategy=strategy)
    t1 = now_ns()
    build_table_ms = ns_to_ms(t1 - t0)

    # encode
    t2 = now_ns()
    bits = codec.huffman_encode(data, code_map)
    packed, pad_bits = pack_bits(bits)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode
    t4 = now_ns()
    decoded = restore(codec.huffman_decode(unpack_bits(packed, pad_bits), code_map), data)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    frequencies = huff.count_frequencies(data)
    tables_match = 1 if reference is None or code_map == reference else 0

    return MetricRow(
        exp_name="",
        dataset_name="",
        input_size=len(data),
        run_id=0,
        strategy=strategy,
        unique_symbols=len(code_map),
        build_table_ms=build_table_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_table_ms + encode_ms + decode_ms,
        encoded_bits=len(bits),
        compressed_bytes=len(packed),
        pad_bits=pad_bits,
        compression_ratio=len(packed) / max(1, original_size_bytes(data)),
        avg_code_length=huff.average_code_length(code_map, frequencies),
        entropy_bits=huff.shannon_entropy(frequencies),
        tables_match=tables_match,
        correctness_ok=1 if decoded == data else 0,
    )


def run_strategies(data: Dataset, exp_name: str, dataset_name: str, run_id: int) -> List[MetricRow]:
    # the linear-scan table is the reference both strategies are checked against
    reference = huff.build_code_table(data, strategy="list")
    rows = []
    for strategy in STRATEGIES:
        row = run_one(data, strategy, reference=reference)
        row.exp_name = exp_name
        row.dataset_name = dataset_name
        row.run_id = run_id
        rows.append(row)
    return rows


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


SUMMARY_METRICS = (
    "compression_ratio",
    "avg_code_length",
    "entropy_bits",
    "build_table_ms",
    "encode_ms",
    "decode_ms",
    "total_ms",
)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, input_size, unique_symbols, strategy and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.input_size, r.unique_symbols, r.strategy)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "input_size", "unique_symbols", "strategy", "n_runs"]
    for metric in SUMMARY_METRICS:
        summary_fields += [f"{metric}_mean", f"{metric}_stdev"]
    summary_fields += ["tables_match_rate", "correctness_ok_rate"]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size, unique, strategy = key
            out = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "input_size": size,
                "unique_symbols": unique,
                "strategy": strategy,
                "n_runs": len(items),
            }
            for metric in SUMMARY_METRICS:
                m, s = mean_stdev([getattr(x, metric) for x in items])
                out[f"{metric}_mean"] = m
                out[f"{metric}_stdev"] = s
            out["tables_match_rate"] = sum(x.tables_match for x in items) / len(items)
            out["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(out)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, strategy: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset and r.strategy == strategy]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    # code length does not depend on the strategy, one line against the entropy bound
    plt.figure()
    plt.plot(x, [mean_for(d, "list", "avg_code_length") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "list", "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Average Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "list", "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bytes / Original Bytes")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    for s in STRATEGIES:
        y = [mean_for(d, s, "build_table_ms") for d in datasets]
        plt.plot(x, y, marker="o", label=s)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Table Build Time (ms)")
    plt.title("Experiment 1: Table Build Time by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_build_time.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_alphabet_scaling"]
    if not exp_rows:
        return

    alphabets = sorted(set(r.unique_symbols for r in exp_rows))

    def mean_alpha(alphabet: int, strategy: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.unique_symbols == alphabet and r.strategy == strategy]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    for s in STRATEGIES:
        y = [mean_alpha(a, s, "build_table_ms") for a in alphabets]
        plt.plot(alphabets, y, marker="o", label=s)
    plt.xscale("log", base=2)
    plt.xlabel("Distinct Symbols")
    plt.ylabel("Table Build Time (ms)")
    plt.title("Experiment 2: Table Build Time vs Alphabet Size")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp2_build_time.png", dpi=200)
    plt.close()


def plot_experiment_3(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp3_strategy_agreement"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))
    x = list(range(len(datasets)))

    def match_rate(dataset: str) -> float:
        vals = [r.tables_match for r in exp_rows if r.dataset_name == dataset and r.strategy == "heap"]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    plt.bar(x, [match_rate(d) for d in datasets])
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylim(0, 1.05)
    plt.ylabel("Fraction of Runs with Identical Tables")
    plt.title("Experiment 3: Heap vs List Table Agreement")
    plt.tight_layout()
    plt.savefig(outdir / "exp3_table_agreement.png", dpi=200)
    plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Compare Huffman node orderings (linear-scan list vs heap)")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (alphabet scaling)")
    ap.add_argument("--no_exp3", action="store_true", help="Disable experiment 3 (strategy agreement)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=128, help="Experiment 1 fixed input size in K symbols")
    ap.add_argument("--exp1_generators", type=str, default="uniform256,zipf128,repetitive90,english_like",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_alphabet", type=int, default=4, help="Experiment 2 smallest alphabet (power-of-two growth)")
    ap.add_argument("--exp2_max_alphabet", type=int, default=4096, help="Experiment 2 largest alphabet")

    # Experiment 3 controls
    ap.add_argument("--exp3_size", type=int, default=2000, help="Experiment 3 input size in symbols")
    ap.add_argument("--exp3_seeds", type=int, default=50, help="Experiment 3 datasets per generator")
    ap.add_argument("--exp3_generators", type=str, default="zipf64,uniform128,english_like,unicode1024",
                    help="Comma-separated dataset generator names for experiment 3")
    return ap


def main(argv: List[str] = None) -> int:
    args = build_parser().parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, data = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                rows += run_strategies(data, "exp1_distribution", dataset_name, run_id)
        print(f"Experiment 1 done ({len(rows)} rows)")

    # Experiment 2: alphabet scaling, every symbol appears at least once
    if not args.no_exp2:
        alphabets: List[int] = []
        a = max(2, args.exp2_min_alphabet)
        while a <= args.exp2_max_alphabet:
            alphabets.append(a)
            a *= 2

        before = len(rows)
        for alphabet in alphabets:
            for run_id in range(1, args.runs + 1):
                rng = random.Random(args.seed + 10_000 + alphabet + run_id)
                symbols = [chr(0x4E00 + i) for i in range(alphabet)]
                extra = [chr(0x4E00 + rng.randrange(alphabet)) for _ in range(alphabet * 8)]
                data = "".join(symbols + extra)
                rows += run_strategies(data, "exp2_alphabet_scaling", f"alphabet{alphabet}", run_id)
        print(f"Experiment 2 done ({len(rows) - before} rows)")

    # Experiment 3: many small datasets, heap table must equal list table
    if not args.no_exp3:
        before = len(rows)
        for gen_name in parse_csv_list(args.exp3_generators):
            for i in range(1, args.exp3_seeds + 1):
                dataset_name, data = generate_dataset(gen_name, args.exp3_size, args.seed + 200_000 + i)
                rows += run_strategies(data, "exp3_strategy_agreement", dataset_name, i)
        print(f"Experiment 3 done ({len(rows) - before} rows)")

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)
    plot_experiment_3(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    match_rate = sum(r.tables_match for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print(f"Table agreement rate across all runs: {match_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
