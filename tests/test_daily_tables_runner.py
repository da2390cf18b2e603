from __future__ import annotations

from pathlib import Path

import pandas as pd

from automation.daily_tables_runner import main, resolve_body_ids
from astro_tables.aspect_sets import MODERN_PLANETS

HOURLY_FILES = (
    "planets_position_hourly_1980-2000.tsv",
    "planets_position_hourly_2001-2019.tsv",
    "planets_position_hourly_2020-2029.tsv",
)
DAILY_FILE = "planets_position_daily_1930-2029.tsv"


def _hourly_day(date: str) -> pd.DataFrame:
    hours = list(range(24))
    return pd.DataFrame(
        {
            "Date": date,
            "Hour": hours,
            "MOLON": [200.0 + 0.5 * h for h in hours],
            "MOSP": [12.0] * 24,
            "SULON": [100.0 + 0.05 * h for h in hours],
            "SUSP": [1.2] * 24,
            "MELON": [100.6] * 24,
            "MESP": [1.5] * 24,
        }
    )


def _data_dir(tmp_path: Path) -> Path:
    data = tmp_path / "data"
    data.mkdir()
    for name, date in zip(HOURLY_FILES, ("1999-06-01", "2010-06-01", "2021-06-01")):
        _hourly_day(date).to_csv(data / name, sep="\t", index=False)
    daily = pd.DataFrame(
        {
            "Date": ["2021-06-01", "2021-06-02"],
            "MOLON": [0.0, 13.0],
            "MOSP": [12.0, 13.0],
            "SULON": [70.1, 71.1],
            "SUSP": [0.96, 0.96],
            "MELON": [80.0, 79.7],
            "MESP": [-0.3, -0.3],
        }
    )
    daily.to_csv(data / DAILY_FILE, sep="\t", index=False)
    return data


def _run(data: Path, out: Path, *extra: str) -> int:
    return main(
        [
            "--data-dir", str(data),
            "--output", str(out),
            "--aspect-set", "ptolemaic",
            "--bodies", "MO,SU,ME",
            *extra,
        ]
    )


def test_resolve_body_ids():
    assert resolve_body_ids("modern") == list(MODERN_PLANETS)
    assert resolve_body_ids("mo, su,ME") == ["MO", "SU", "ME"]


def test_runner_exports_all_tables(tmp_path):
    data = _data_dir(tmp_path)
    out = tmp_path / "out"
    assert _run(data, out) == 0

    aspects = pd.read_csv(out / "aspects_ptolemaic_daily_long.csv")
    assert list(aspects.columns) == [
        "Date", "origin", "aspect", "meanOrb", "minOrb", "maxOrb",
        "startHour", "endHour", "exactHour", "effHours", "pX", "pY",
    ]
    assert aspects["Date"].tolist() == ["1999-06-01", "2010-06-01", "2021-06-01"]
    assert set(aspects["origin"]) == {"SUME"}
    assert aspects["exactHour"].tolist() == [12, 12, 12]

    positions = pd.read_csv(out / "daily_planets_positions_long.csv")
    assert len(positions) == 6
    assert positions.loc[0, "pID"] == "ME"
    assert "SpeedPhaseID" in positions.columns

    speed = pd.read_csv(out / "daily_planets_speed_long.csv")
    assert speed.loc[speed["pID"] == "ME", "SpeedPhaseID"].tolist() == ["RET", "RET"]


def test_runner_output_is_deterministic(tmp_path):
    data = _data_dir(tmp_path)
    first, second = tmp_path / "a", tmp_path / "b"
    assert _run(data, first, "--tables", "aspects") == 0
    assert _run(data, second, "--tables", "aspects") == 0
    name = "aspects_ptolemaic_daily_long.csv"
    assert (first / name).read_bytes() == (second / name).read_bytes()
    assert not (first / "daily_planets_positions_long.csv").exists()


def test_runner_with_names(tmp_path):
    data = _data_dir(tmp_path)
    out = tmp_path / "out"
    assert _run(data, out, "--tables", "aspects", "--with-names") == 0
    aspects = pd.read_csv(out / "aspects_ptolemaic_daily_long.csv")
    assert aspects["aspectName"].unique().tolist() == ["Conjunction"]
    assert aspects["pXName"].unique().tolist() == ["Sun"]


def test_runner_missing_data_writes_nothing(tmp_path):
    data = _data_dir(tmp_path)
    (data / DAILY_FILE).unlink()
    out = tmp_path / "out"
    assert _run(data, out) == 2
    assert not out.exists()


def test_runner_rejects_bad_bodies(tmp_path):
    data = _data_dir(tmp_path)
    assert main(["--data-dir", str(data), "--bodies", "MO"]) == 2


def test_runner_config_file(tmp_path):
    data = _data_dir(tmp_path)
    out = tmp_path / "from_yaml"
    config = tmp_path / "tables.yaml"
    config.write_text(
        f"data_dir: {data}\n"
        f"output_dir: {out}\n"
        "aspect_set: ptolemaic\n"
        "body_ids: [SU, ME]\n",
        encoding="utf-8",
    )
    assert main(["--config", str(config), "--tables", "aspects"]) == 0
    aspects = pd.read_csv(out / "aspects_ptolemaic_daily_long.csv")
    assert len(aspects) == 3


def test_runner_config_without_hourly_shards(tmp_path):
    data = _data_dir(tmp_path)
    out = tmp_path / "out"
    config = tmp_path / "daily_only.yaml"
    config.write_text(
        f"data_dir: {data}\n"
        f"output_dir: {out}\n"
        "position_files:\n"
        f"  daily: [{DAILY_FILE}]\n",
        encoding="utf-8",
    )
    assert main(["--config", str(config), "--tables", "aspects"]) == 2
    assert not out.exists()


def test_runner_empty_shard(tmp_path):
    data = _data_dir(tmp_path)
    (data / DAILY_FILE).write_text("", encoding="utf-8")
    out = tmp_path / "out"
    assert _run(data, out, "--tables", "speed") == 2
    assert not out.exists()
