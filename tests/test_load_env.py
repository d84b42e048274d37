import os
from pathlib import Path

import run


def test_dotenv_values_fill_gaps_but_never_replace_exported_vars(tmp_path: Path, monkeypatch):
    (tmp_path / ".env").write_text("TOUR_API_KEY=key-in-file\nTOUR_EXTRA=extra-in-file\n", encoding="utf-8")
    seen = []

    def recording_load_dotenv(*, dotenv_path, override=False):
        seen.append((Path(dotenv_path), override))
        for line in Path(dotenv_path).read_text(encoding="utf-8").splitlines():
            name, _, value = line.partition("=")
            if override or name not in os.environ:
                monkeypatch.setenv(name, value)
        return True

    monkeypatch.setattr(run, "_load_dotenv", recording_load_dotenv)
    monkeypatch.setenv("TOUR_API_KEY", "exported-key")
    monkeypatch.delenv("TOUR_EXTRA", raising=False)

    run.load_env(root_dir=tmp_path)

    assert seen == [((tmp_path / ".env").resolve(), False)]
    assert os.environ["TOUR_API_KEY"] == "exported-key"
    assert os.environ["TOUR_EXTRA"] == "extra-in-file"


def test_absent_dotenv_file_is_not_loaded(tmp_path: Path, monkeypatch):
    calls = []
    monkeypatch.setattr(run, "_load_dotenv", lambda **kwargs: calls.append(kwargs))

    run.load_env(root_dir=tmp_path)

    assert calls == []
