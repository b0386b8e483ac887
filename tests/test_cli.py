import numpy as np
from click.testing import CliRunner
from PIL import Image

from combiner.cli import main


def test_cli_requires_three_paths(tmp_path):
    runner = CliRunner()

    result = runner.invoke(main, ['only_one.png', '--log-dir', str(tmp_path / 'logs')])

    assert result.exit_code == 2
    assert 'Missing argument' in result.output
    assert not (tmp_path / 'logs').exists()


def test_cli_combines_images(tmp_path, write_image, first_pixels, second_pixels):
    first = write_image('first.png', first_pixels)
    second = write_image('second.png', second_pixels)
    destination = tmp_path / 'combined.png'
    log_dir = tmp_path / 'logs'

    result = CliRunner().invoke(main, [
        str(first), str(second), str(destination),
        '--policy', 'true-minimum', '--filter', 'nearest', '--log-dir', str(log_dir)
    ])

    assert result.exit_code == 0, result.output
    assert 'Processing Summary:' in result.output
    assert destination.exists()
    with Image.open(destination) as image:
        assert image.size == (2, 1)

    logs = list(log_dir.glob('combiner_run_*.log'))
    assert len(logs) == 1
    assert 'Run completed' in logs[0].read_text(encoding='utf-8')


def test_cli_aborts_on_format_mismatch(tmp_path, write_image, first_pixels):
    first = write_image('first.png', first_pixels)
    second = write_image('second.bmp', np.zeros((1, 2, 3), dtype=np.uint8), fmt='BMP')
    destination = tmp_path / 'combined.png'

    result = CliRunner().invoke(main, [str(first), str(second), str(destination), '--log-dir', str(tmp_path)])

    assert result.exit_code == 1
    assert 'Error: Images have different formats: PNG and BMP' in result.output
    assert not destination.exists()


def test_cli_logs_a_failure_once(tmp_path, write_image, first_pixels):
    first = write_image('first.png', first_pixels)
    second = write_image('second.bmp', np.zeros((1, 2, 3), dtype=np.uint8), fmt='BMP')
    log_dir = tmp_path / 'logs'

    result = CliRunner().invoke(main, [str(first), str(second), str(tmp_path / 'out.png'), '--log-dir', str(log_dir)])

    assert result.exit_code == 1
    log_text = next(log_dir.glob('combiner_run_*.log')).read_text(encoding='utf-8')
    error_lines = [line for line in log_text.splitlines() if '| ERROR |' in line]
    assert len(error_lines) == 1
    assert 'Run failed in Pipeline' in error_lines[0]
