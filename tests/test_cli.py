import json

import numpy as np

from pose_offsets import io
from pose_offsets.poses import translation_pose
from pose_offsets.scripts.solve_offsets import main


def _write_poses(path, poses):
    path.write_text(json.dumps([io.pose_to_json(p) for p in poses]))
    return str(path)


def test_solve_offsets_script(tmp_path, capsys):
    model = _write_poses(tmp_path / "model.json", [np.eye(4)])
    space = _write_poses(tmp_path / "space.json", [translation_pose(1, 0, 0)])
    output = tmp_path / "output.json"
    table = tmp_path / "offsets.csv"
    assert main([model, space, "-o", str(output), "--csv", str(table)]) == 0
    assert "Found 1 offsets" in capsys.readouterr().out
    np.testing.assert_allclose(
        io.load_pose_set(output)[0], translation_pose(1, 0, 0)
    )
    assert table.exists()

    # refuses to overwrite without --force
    assert main([model, space, "-o", str(output)]) == 1
    assert main([model, space, "-o", str(output), "-f"]) == 0


def test_solve_offsets_script_bad_input(tmp_path):
    space = _write_poses(tmp_path / "space.json", [np.eye(4)])
    output = str(tmp_path / "output.json")
    assert main([str(tmp_path / "missing.json"), space, "-o", output]) == 1

    empty = _write_poses(tmp_path / "empty.json", [])
    assert main([empty, space, "-o", output]) == 1


def test_solve_offsets_script_strict(tmp_path):
    model = _write_poses(tmp_path / "model.json", [np.zeros((4, 4))])
    space = _write_poses(tmp_path / "space.json", [np.eye(4)])
    output = str(tmp_path / "output.json")
    assert main([model, space, "-o", output, "--strict"]) == 1
    assert main([model, space, "-o", output]) == 0
    assert len(io.load_pose_set(output)) == 0


def test_solve_offsets_script_writes_nothing_when_csv_exists(tmp_path):
    model = _write_poses(tmp_path / "model.json", [np.eye(4)])
    space = _write_poses(tmp_path / "space.json", [translation_pose(1, 0, 0)])
    output = tmp_path / "output.json"
    table = tmp_path / "offsets.csv"
    table.write_text("offset\n")
    assert main([model, space, "-o", str(output), "--csv", str(table)]) == 1
    assert not output.exists()
    assert table.read_text() == "offset\n"
