"""Factory functions for creating tokenizers."""

from .tokenizer import DEFAULT_VOCAB_SIZE, BytePairTokenizer


def train_tokenizer(
    text: str | list[str],
    vocab_size: int = DEFAULT_VOCAB_SIZE,
    verbose: bool = False,
    show_progress: bool = True,
) -> BytePairTokenizer:
    """
    Create and train a tokenizer in one call.

    :param text: Training text as a single string or list of strings.
    :param vocab_size: Target vocabulary size including the base 256 bytes.
    :return: Trained tokenizer.

    .. code-block:: python

        tokenizer = train_tokenizer(corpus, vocab_size=512)
        tokens = tokenizer.encode("Hello world")
    """
    # handle list input
    if isinstance(text, list):
        text = "".join(text)

    tokenizer = BytePairTokenizer(text, vocab_size)
    tokenizer.train(verbose=verbose, show_progress=show_progress)
    return tokenizer


def from_pretrained(model_path: str) -> BytePairTokenizer:
    """
    Load a pre-trained tokenizer from disk.

    :param model_path: Path to the .model file.
    :return: Loaded, trained tokenizer.
    :raises ModelLoadError: If the file doesn't exist, has the wrong extension,
                            or is malformed.

    .. code-block:: python

        tokenizer = from_pretrained("path/to/model.model")
        tokens = tokenizer.encode("Hello world")
    """
    return BytePairTokenizer.load(model_path)
