"""
Text Preprocessor Module

Turns raw training text into the word sequence a MarkovChain is trained on.

### Steps
Each step is a method taking and returning a string. `preprocess` runs the
enabled ones in this fixed order:

1. `html`         - `remove_html_tags`, strips markup with BeautifulSoup
2. `urls`         - `handle_urls`, drops http(s) and www links
3. `lowercase`    - `to_lowercase`
4. `contractions` - `handle_contractions`, "can't" -> "cannot"
5. `accents`      - `normalize`, folds accented characters to ASCII
6. `emojis`       - `handle_emojis`, emoji -> ":name:" text via `emoji`
7. `punctuation`  - `remove_punctuation`, removes anything that is neither
   a word character nor whitespace
8. `whitespace`   - `handle_whitespace`, collapses runs of whitespace

`tokenize` splits the result on whitespace with nltk's `WhitespaceTokenizer`.

### Example Usage:

```python
from markov_graph.nlps.text_preprocessor import TextPreprocessor

preprocessor = TextPreprocessor(steps=["lowercase", "punctuation", "whitespace"])
preprocessor.to_tokens("The cat, the HAT!")
# ['the', 'cat', 'the', 'hat']
```
"""

import re
import unicodedata

from bs4 import BeautifulSoup
from emoji import demojize
from nltk.tokenize import WhitespaceTokenizer

from markov_graph.utils.config_loader import DEFAULT_CONFIG, PREPROCESSING_STEPS

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_URL_RE = re.compile(r"http\S+|www\S+|https\S+")

CONTRACTIONS = {
    "can't": "cannot",
    "won't": "will not",
    "n't": " not",
    "'re": " are",
    "'s": " is",
    "'d": " would",
    "'ll": " will",
    "'t": " not",
    "'ve": " have",
    "'m": " am",
}
_IRREGULAR_CONTRACTIONS = ("can't", "won't")
_CONTRACTION_SUFFIXES = [k for k in CONTRACTIONS if k not in _IRREGULAR_CONTRACTIONS]
# Suffixes attach to the word they follow: "don't" -> "do" + "n't"
_CONTRACTIONS_RE = re.compile(
    r"\b(?:" + "|".join(_IRREGULAR_CONTRACTIONS) + r")\b"
    r"|(?<=\w)(?:" + "|".join(_CONTRACTION_SUFFIXES) + r")\b"
)


class TextPreprocessor:
    def __init__(self, steps=None):
        """
        Initializes the TextPreprocessor with the normalization steps to run.

        Args:
            steps (list of str, optional): Step names from PREPROCESSING_STEPS.
                Defaults to the steps in DEFAULT_CONFIG.

        Raises:
            ValueError: If a step name is not recognised.
        """
        if steps is None:
            steps = DEFAULT_CONFIG["preprocessing"]["steps"]

        unknown = [step for step in steps if step not in PREPROCESSING_STEPS]
        if unknown:
            raise ValueError(f"Unknown preprocessing steps: {unknown}")

        # Keep the canonical order regardless of how steps were listed
        self.steps = [step for step in PREPROCESSING_STEPS if step in steps]
        self.tokenizer = WhitespaceTokenizer()
        self._step_functions = {
            "html": self.remove_html_tags,
            "urls": self.handle_urls,
            "lowercase": self.to_lowercase,
            "contractions": self.handle_contractions,
            "accents": self.normalize,
            "emojis": self.handle_emojis,
            "punctuation": self.remove_punctuation,
            "whitespace": self.handle_whitespace,
        }

    @classmethod
    def from_config(cls, config):
        """Build a preprocessor from a loaded project configuration."""
        return cls(steps=config["preprocessing"]["steps"])

    def to_lowercase(self, text):
        """Converts text to lowercase."""
        return text.lower()

    def remove_punctuation(self, text):
        """Removes every character that is not a word character or whitespace."""
        return _PUNCTUATION_RE.sub("", text)

    def handle_whitespace(self, text):
        """Removes extra whitespace from text."""
        return " ".join(text.split())

    def handle_contractions(self, text):
        """Expands contractions in text."""
        return _CONTRACTIONS_RE.sub(lambda x: CONTRACTIONS[x.group()], text)

    def normalize(self, text):
        """Normalizes text by removing accents and converting to ASCII."""
        return (
            unicodedata.normalize("NFKD", text)
            .encode("ascii", "ignore")
            .decode("utf-8", "ignore")
        )

    def handle_emojis(self, text):
        """Converts emojis to their textual representation."""
        return demojize(text)

    def handle_urls(self, text):
        """Removes URLs from text."""
        return _URL_RE.sub("", text)

    def remove_html_tags(self, text):
        """Removes HTML tags from text."""
        return BeautifulSoup(text, "html.parser").get_text()

    def handle_missing_data(self, text):
        """Replaces None or other empty values with an empty string."""
        return text if text else ""

    def tokenize(self, text):
        """Splits text into words on whitespace."""
        return self.tokenizer.tokenize(text)

    def preprocess(self, text):
        """
        Run every enabled step over ``text``.

        Args:
            text (str or None): Raw input text

        Returns:
            str: Normalized text
        """
        text = self.handle_missing_data(text)
        for step in self.steps:
            text = self._step_functions[step](text)
        return text

    def to_tokens(self, text):
        """
        Normalize raw text and split it into the word sequence used for training.

        Args:
            text (str or None): Raw input text

        Returns:
            list of str: Words in their original order
        """
        return self.tokenize(self.preprocess(text))
