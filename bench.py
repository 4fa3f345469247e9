"""Benchmark tokenize/encode/decode on a slice of a Hugging Face text dataset.

Outputs one markdown row:
  Corpus Size | Vocab Size | Strategy | Encoding Throughput |
  Decoding Throughput | Tokens/Word | Unknown Rate
"""

import argparse
import logging
import time

from datasets import load_dataset

from vocabtok import from_pretrained, list_strategies

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)


def load_corpus(num_docs: int | None) -> list[str]:
    """Load up to `num_docs` documents via dataset indexing; full dataset when None."""
    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    if num_docs is not None:
        return ds[:num_docs]["text"]
    return ds["text"]


def main() -> None:
    """Run the benchmark and print a markdown-compatible row."""
    parser = argparse.ArgumentParser(
        description="Benchmark vocabtok encode() and decode()."
    )
    parser.add_argument(
        "--config",
        type=str,
        default="tokenizer/tokenizer.json",
        help="Tokenizer JSON config (default: tokenizer/tokenizer.json).",
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=100,
        help="Number of documents to encode (default: 100).",
    )
    parser.add_argument(
        "--strategy",
        choices=list_strategies(),
        default="auto",
        help="Tokenization strategy (default: auto).",
    )
    args = parser.parse_args()

    docs = load_corpus(args.num_docs)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")

    tokenizer = from_pretrained(args.config, strategy=args.strategy)

    total_bytes = sum(len(d.encode("utf-8")) for d in docs)
    corpus_mb = total_bytes / (1024 * 1024)

    # --- Encoding ---
    t0 = time.perf_counter()
    encoded = [tokenizer.encode(doc) for doc in docs]
    encode_elapsed = time.perf_counter() - t0
    encode_mbps = total_bytes / encode_elapsed / (1024 * 1024)

    # --- Decoding ---
    t0 = time.perf_counter()
    for ids in encoded:
        tokenizer.decode(ids)
    decode_elapsed = time.perf_counter() - t0
    total_tokens = sum(len(ids) for ids in encoded)
    decode_ktps = total_tokens / decode_elapsed / 1_000

    # --- Coverage stats ---
    results = [tokenizer.tokenize(doc) for doc in docs]
    total_words = sum(r.word_count for r in results)
    total_unknown = sum(r.unknown_count for r in results)
    tokens_per_word = total_tokens / total_words if total_words else 0.0
    unknown_rate = 100 * total_unknown / total_tokens if total_tokens else 0.0

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':12} | {'Vocab Size':10} | {'Strategy':8} "
        f"| {'Encoding Throughput':19} | {'Decoding Throughput':19} "
        f"| {'Tokens/Word':11} | {'Unknown Rate':12} |"
    )
    sep = (
        f"| {'-' * 12} | {'-' * 10} | {'-' * 8} "
        f"| {'-' * 19} | {'-' * 19} "
        f"| {'-' * 11} | {'-' * 12} |"
    )
    row = (
        f"| {f'{corpus_mb:.2f} MB':12} | {tokenizer.vocab_size():10,} | {args.strategy:8} "
        f"| {f'{encode_mbps:.2f} MB/sec':19} | {f'{decode_ktps:.1f}K tokens/sec':19} "
        f"| {f'{tokens_per_word:.2f}':11} | {f'{unknown_rate:.1f}%':12} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
