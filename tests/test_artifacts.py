import json
from pathlib import Path

from eduko.artifacts import save_json_error, save_run
from eduko.models import FormGuide, SpeechOutput


def test_save_run_writes_raw_and_result(tmp_path):
    runs_dir = str(tmp_path / "runs")

    paths = save_run("generate-form-filling-guide", '{"guide":"x"}', FormGuide(guide="x"), runs_dir=runs_dir)

    assert Path(paths["raw_path"]).read_text(encoding="utf-8") == '{"guide":"x"}'
    assert Path(paths["result_path"]).name.startswith("result_generate-form-filling-guide_")
    assert json.loads(Path(paths["result_path"]).read_text(encoding="utf-8")) == {"guide": "x"}


def test_save_run_without_raw_uses_aliases(tmp_path):
    paths = save_run("generate-speech", None, SpeechOutput(audio_data_uri="data:,"), runs_dir=str(tmp_path))

    assert "raw_path" not in paths
    assert Path(paths["result_path"]).read_text(encoding="utf-8") == '{"audioDataUri":"data:,"}'


def test_save_json_error(tmp_path):
    path = save_json_error("oops", "Expecting value", "json_decode", runs_dir=str(tmp_path))

    contents = Path(path).read_text(encoding="utf-8")
    assert contents.startswith("MODEL_OUTPUT_FAILURE\nkind: json_decode\n")
    assert contents.endswith("---- RAW OUTPUT ----\noops")
