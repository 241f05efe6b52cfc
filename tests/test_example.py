"""
test_example.py
~~~~~~~~~~~~~~~

Tests for the logic gate demo driver.
"""

import os

import pytest

from neuronet.example import logic_gate_dataset, main, run_logic_gate_demo
from neuronet.trainer import TrainingStatus, TrainParameters


@pytest.mark.unit
class TestDataset:
    """Test logic gate truth tables."""

    def test_and(self):
        inputs, targets = logic_gate_dataset('and')
        assert inputs == [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
        assert targets == [[0.0], [0.0], [0.0], [1.0]]

    def test_or(self):
        assert logic_gate_dataset('OR')[1] == [[0.0], [1.0], [1.0], [1.0]]

    def test_xor(self):
        assert logic_gate_dataset('xor')[1] == [[0.0], [1.0], [1.0], [0.0]]

    def test_unknown_gate(self):
        with pytest.raises(ValueError):
            logic_gate_dataset('nand')


@pytest.mark.integration
class TestDemo:
    """Test running the demo end to end."""

    def test_run_returns_trained_network(self):
        params = TrainParameters(max_epochs=50)
        network, result = run_logic_gate_demo('and', params=params, seed=1)

        assert network.structure.name == 'and'
        assert result.status in (TrainingStatus.CONVERGED, TrainingStatus.MAX_EPOCHS_REACHED)
        assert result.epochs <= 50
        assert len(result.history.errors) == result.epochs

    def test_momentum_run(self):
        params = TrainParameters(max_epochs=30)
        _, result = run_logic_gate_demo('or', params=params, momentum=True, seed=1)
        assert result.epochs <= 30

    def test_main_saves_outputs(self, tmp_path, capsys):
        model = str(tmp_path / "xor.txt")
        plot = str(tmp_path / "xor.png")

        main(['--gate', 'xor', '--hidden', '3', '--max-epochs', '25',
              '--save', model, '--plot', plot])

        out = capsys.readouterr().out
        assert "Training XOR gate" in out
        assert os.path.exists(model)
        assert os.path.exists(plot)
