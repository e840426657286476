"""Benchmark BytePairTokenizer training, encoding and decoding on a Gutenberg slice."""

import argparse
import logging
import time
from pathlib import Path

from datasets import load_dataset

from bptok import BytePairTokenizer, from_pretrained

# Configure logging to show INFO level and above.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"


def format_bytes(num_bytes: float) -> str:
    """Format bytes to human-readable string."""
    for unit in ["B", "KB", "MB", "GB"]:
        if num_bytes < 1024.0:
            return f"{num_bytes:.2f} {unit}"
        num_bytes /= 1024.0
    return f"{num_bytes:.2f} TB"


def load_corpus(num_docs: int) -> str:
    """Load the first `num_docs` documents joined into one training text."""
    print(f"Loading {HF_DATASET} …")
    ds = load_dataset(HF_DATASET, split="train")
    return "".join(ds[:num_docs]["text"])


def load_or_train(
    model_path: Path | None, text: str, vocab_size: int
) -> tuple[BytePairTokenizer, float]:
    """Return (tokenizer, training_seconds), loading from disk when requested."""
    if model_path and model_path.exists():
        print(f"Loaded model from {model_path}")
        return from_pretrained(str(model_path)), 0.0
    if model_path:
        print(f"Model not found at {model_path}; training a new one.")

    tokenizer = BytePairTokenizer(text, vocab_size)
    start = time.perf_counter()
    tokenizer.train()
    return tokenizer, time.perf_counter() - start


def main() -> None:
    """Run the benchmark and print a summary."""
    parser = argparse.ArgumentParser(
        description="Benchmark bptok train(), encode() and decode()."
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=20,
        help="Number of documents to train and encode on (default: 20).",
    )
    parser.add_argument(
        "--vocab-size",
        type=int,
        default=512,
        help="Vocab size for training (default: 512).",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Optional existing .model path to load; default trains a fresh model.",
    )
    parser.add_argument(
        "--save",
        type=str,
        default=None,
        help="Optional file prefix to save the trained model to.",
    )
    args = parser.parse_args()

    text = load_corpus(args.num_docs)
    if not text:
        raise RuntimeError("No documents loaded from dataset.")

    text_size = len(text.encode("utf-8"))
    print(f"   Text size: {format_bytes(text_size)} ({len(text):,} chars)")

    model_path = Path(args.model) if args.model else None
    tokenizer, train_secs = load_or_train(model_path, text, args.vocab_size)
    print(f"   ✓ Training completed in {train_secs:.3f}s")
    print(f"   ✓ Merges: {len(tokenizer.merges):,}")

    t0 = time.perf_counter()
    encoded = tokenizer.encode(text)
    encode_secs = time.perf_counter() - t0

    t0 = time.perf_counter()
    decoded = tokenizer.decode(encoded)
    decode_secs = time.perf_counter() - t0

    assert decoded == text, "Decode failed: output doesn't match input"

    ratio = text_size / len(encoded)
    print(f"   ✓ Encode: {encode_secs * 1000:.2f}ms ({len(encoded):,} tokens)")
    print(f"   ✓ Decode: {decode_secs * 1000:.2f}ms")
    print(f"   Compression ratio: {ratio:.2f}x")
    print(f"   Size reduction: {(1 - 1 / ratio) * 100:.1f}%")

    if args.save:
        tokenizer.save(args.save)
        print(f"   ✓ Model saved to {args.save}")


if __name__ == "__main__":
    main()
