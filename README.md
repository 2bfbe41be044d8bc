# sanitize-engine

A one-way data sanitization library. Sensitive values such as e-mail
addresses, IP addresses, tokens and file paths are replaced with substitutes
that keep the original's format and byte length. There is no key file and no
way back to the original values.

## What it provides

- **Categories** (`Category`): each detected value has a category, and the
  category decides the shape of its replacement. Categories you define
  yourself are made with `Category.custom(name)`.
- **Generators**: `HmacGenerator` is seeded with a 32-byte key. The same key
  and the same input always give the same output, across runs.
  `RandomGenerator` draws fresh random replacements every time.
- **Allowlists** (`AllowlistMatcher`): values that should pass through
  untouched, as exact strings or simple `*` globs such as `*.internal` or
  `192.168.1.*`.
- **Atomic output** (`AtomicFileWriter`, `atomic_write`): output goes to a
  temporary file next to the destination and is renamed into place only once
  it is complete. An interrupted write leaves nothing behind.
- **Log context** (`extract_context`, `extract_context_reader`): finds lines
  containing keywords such as `error` or `warning` and captures the
  surrounding lines. The reader variant streams large files in bounded
  memory.
- **LLM prompts** (`format_llm_prompt`, `resolve_llm_template`): builds a
  structured prompt from sanitized content, using either the built-in
  `troubleshoot` or `review-config` template or a template file of your own.
- **Progress reporting** (`ProgressReporter`): shows a live spinner on a
  terminal and prints milestone lines in CI or other non-interactive
  environments.

## Examples

Deterministic, length-preserving replacement:

```python
from sanitize_engine.category import Category
from sanitize_engine.generator import HmacGenerator

generator = HmacGenerator(bytes(32))
category = Category.custom("api_key")

first = generator.generate(category, "some-secret-value-here")
second = generator.generate(category, "some-secret-value-here")
assert first == second
assert len(first) == len("some-secret-value-here")
assert first.startswith("__SANITIZED_")
```

Allowlisting:

```python
from sanitize_engine.allowlist import AllowlistMatcher

matcher = AllowlistMatcher(["localhost", "*.internal"])
assert matcher.is_allowed("db.internal")
assert matcher.match_pattern("db.internal") == "*.internal"
assert not matcher.is_allowed("mail.example.com")
```

Writing a file atomically:

```python
from sanitize_engine.atomic import AtomicFileWriter, atomic_write

atomic_write("report.txt", b"all done\n")

with AtomicFileWriter("streamed.txt") as writer:
    for i in range(3):
        writer.write(f"line {i}\n".encode())
```

Pulling context out of a log:

```python
from sanitize_engine.log_context import LogContextConfig, extract_context

log = "INFO start\nERROR disk full\nINFO retrying\nINFO done"
result = extract_context(log, LogContextConfig().with_context_lines(1))

assert result.match_count == 1
match = result.matches[0]
assert match.line_number == 2
assert match.keyword == "error"
assert match.before == ["INFO start"]
assert match.after == ["INFO retrying"]
```

Building a prompt for an LLM:

```python
from sanitize_engine.llm import format_llm_prompt

entries = [("app.log", b"INFO start\nERROR disk full\n")]
prompt = format_llm_prompt("troubleshoot", entries, None)
assert '<content name="app.log">' in prompt
```

## Errors

Failures raise subclasses of `SanitizeError` from `sanitize_engine.errors`,
for example `InvalidSeedLengthError` when a generator key is not 32 bytes
long. Template lookups that fail raise `TemplateError`.