"""
Language tagging for extracted snippets.

Maps a source path to the label written after the opening fence (```rust).
The lookup goes through a single ``classify(path)`` function so that any
classification table can be plugged in; the default is a static
extension/filename table. An unknown file is not an error: the fence is
simply emitted untagged.
"""

from pathlib import Path, PurePath
from typing import Callable, Dict, NamedTuple, Optional, Union
import logging

logger = logging.getLogger(__name__)


class LanguageTag(NamedTuple):
    """Display name plus the highlight mode used as the fence label."""
    name: str
    highlight: str


Classifier = Callable[[Union[str, PurePath]], Optional[LanguageTag]]


class LanguageDetector:
    """
    Classify source files by extension or well-known file name.

    Supported languages include the mainstream compiled and scripting
    languages, shells, markup and configuration formats. Extensions are
    matched case-insensitively.
    """

    # Extension -> (display name, highlight mode)
    EXTENSION_MAPPINGS: Dict[str, LanguageTag] = {
        # Python
        '.py': LanguageTag('Python', 'python'),
        '.pyi': LanguageTag('Python', 'python'),
        '.pyw': LanguageTag('Python', 'python'),

        # Rust
        '.rs': LanguageTag('Rust', 'rust'),

        # Go
        '.go': LanguageTag('Go', 'go'),

        # JavaScript / TypeScript
        '.js': LanguageTag('JavaScript', 'javascript'),
        '.mjs': LanguageTag('JavaScript', 'javascript'),
        '.cjs': LanguageTag('JavaScript', 'javascript'),
        '.jsx': LanguageTag('JSX', 'jsx'),
        '.ts': LanguageTag('TypeScript', 'typescript'),
        '.mts': LanguageTag('TypeScript', 'typescript'),
        '.tsx': LanguageTag('TSX', 'tsx'),

        # C family
        '.c': LanguageTag('C', 'c'),
        '.h': LanguageTag('C', 'c'),
        '.cc': LanguageTag('C++', 'cpp'),
        '.cpp': LanguageTag('C++', 'cpp'),
        '.cxx': LanguageTag('C++', 'cpp'),
        '.hpp': LanguageTag('C++', 'cpp'),
        '.cs': LanguageTag('C#', 'csharp'),
        '.m': LanguageTag('Objective-C', 'objectivec'),

        # JVM
        '.java': LanguageTag('Java', 'java'),
        '.kt': LanguageTag('Kotlin', 'kotlin'),
        '.kts': LanguageTag('Kotlin', 'kotlin'),
        '.scala': LanguageTag('Scala', 'scala'),
        '.groovy': LanguageTag('Groovy', 'groovy'),
        '.clj': LanguageTag('Clojure', 'clojure'),

        # Other general purpose
        '.rb': LanguageTag('Ruby', 'ruby'),
        '.php': LanguageTag('PHP', 'php'),
        '.swift': LanguageTag('Swift', 'swift'),
        '.dart': LanguageTag('Dart', 'dart'),
        '.lua': LanguageTag('Lua', 'lua'),
        '.pl': LanguageTag('Perl', 'perl'),
        '.r': LanguageTag('R', 'r'),
        '.jl': LanguageTag('Julia', 'julia'),
        '.hs': LanguageTag('Haskell', 'haskell'),
        '.ml': LanguageTag('OCaml', 'ocaml'),
        '.ex': LanguageTag('Elixir', 'elixir'),
        '.exs': LanguageTag('Elixir', 'elixir'),
        '.erl': LanguageTag('Erlang', 'erlang'),
        '.zig': LanguageTag('Zig', 'zig'),
        '.nim': LanguageTag('Nim', 'nim'),

        # Shell
        '.sh': LanguageTag('Shell', 'bash'),
        '.bash': LanguageTag('Shell', 'bash'),
        '.zsh': LanguageTag('Shell', 'bash'),
        '.fish': LanguageTag('fish', 'fish'),
        '.ps1': LanguageTag('PowerShell', 'powershell'),
        '.bat': LanguageTag('Batchfile', 'batch'),

        # Data / config
        '.sql': LanguageTag('SQL', 'sql'),
        '.json': LanguageTag('JSON', 'json'),
        '.yaml': LanguageTag('YAML', 'yaml'),
        '.yml': LanguageTag('YAML', 'yaml'),
        '.toml': LanguageTag('TOML', 'toml'),
        '.ini': LanguageTag('INI', 'ini'),
        '.xml': LanguageTag('XML', 'xml'),
        '.proto': LanguageTag('Protocol Buffer', 'protobuf'),
        '.graphql': LanguageTag('GraphQL', 'graphql'),

        # Markup / web
        '.html': LanguageTag('HTML', 'html'),
        '.htm': LanguageTag('HTML', 'html'),
        '.css': LanguageTag('CSS', 'css'),
        '.scss': LanguageTag('SCSS', 'scss'),
        '.md': LanguageTag('Markdown', 'markdown'),
        '.markdown': LanguageTag('Markdown', 'markdown'),
        '.rst': LanguageTag('reStructuredText', 'rst'),
        '.tex': LanguageTag('TeX', 'latex'),
        '.vue': LanguageTag('Vue', 'vue'),
        '.svelte': LanguageTag('Svelte', 'svelte'),

        # Build
        '.cmake': LanguageTag('CMake', 'cmake'),
        '.mk': LanguageTag('Makefile', 'makefile'),
        '.tf': LanguageTag('HCL', 'hcl'),
        '.nix': LanguageTag('Nix', 'nix'),
    }

    # Files recognized by name rather than extension
    FILENAME_MAPPINGS: Dict[str, LanguageTag] = {
        'Dockerfile': LanguageTag('Dockerfile', 'dockerfile'),
        'Makefile': LanguageTag('Makefile', 'makefile'),
        'GNUmakefile': LanguageTag('Makefile', 'makefile'),
        'CMakeLists.txt': LanguageTag('CMake', 'cmake'),
        'Justfile': LanguageTag('Just', 'just'),
        'Gemfile': LanguageTag('Ruby', 'ruby'),
        'Rakefile': LanguageTag('Ruby', 'ruby'),
    }

    def __init__(
        self,
        extra_extensions: Optional[Dict[str, LanguageTag]] = None,
        extra_filenames: Optional[Dict[str, LanguageTag]] = None
    ):
        """
        Initialize language detector.

        Args:
            extra_extensions: Additional or overriding extension mappings
                            (keys include the leading dot)
            extra_filenames: Additional or overriding file name mappings
        """
        self.extensions = dict(self.EXTENSION_MAPPINGS)
        self.extensions.update({k.lower(): v for k, v in (extra_extensions or {}).items()})
        self.filenames = dict(self.FILENAME_MAPPINGS)
        self.filenames.update(extra_filenames or {})

    def classify(self, path: Union[str, PurePath]) -> Optional[LanguageTag]:
        """
        Classify a source file.

        Args:
            path: Source file path

        Returns:
            LanguageTag, or None if the file type is unknown
        """
        path = PurePath(path)

        by_name = self.filenames.get(path.name)
        if by_name:
            return by_name

        return self.extensions.get(path.suffix.lower())

    def tag(self, path: Union[str, PurePath]) -> Optional[str]:
        """Fence label for a source file, or None to leave the fence untagged."""
        language = self.classify(path)
        return language.highlight if language else None


_default_detector = LanguageDetector()


def classify(path: Union[str, PurePath]) -> Optional[LanguageTag]:
    """Default classifier backed by the static LanguageDetector tables."""
    return _default_detector.classify(path)


def tag(path: Union[str, Path], classifier: Optional[Classifier] = None) -> Optional[str]:
    """
    Convenience function to compute the fence label for a source path.

    Args:
        path: Source file path
        classifier: Optional replacement for the default classify()

    Returns:
        Highlight label, or None when the classifier does not know the file

    Example:
        >>> tag("src/lib.rs")
        'rust'
        >>> tag("data.unknown") is None
        True
    """
    language = (classifier or classify)(path)
    if language is None:
        logger.debug(f"No language classification for {path}; fence stays untagged")
        return None
    return language.highlight
