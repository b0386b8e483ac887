import numpy as np
import pytest

from combiner.chainable.assemblex import OutputAssembler, assemble
from combiner.chainable.basex import BufferTooSmall, PixelBuffer


def test_assemble_reserves_capacity_without_data():
    output = assemble(3, 2, 'out.png')

    assert output.capacity == 3 * 2 * 4
    assert output.data.size == 0
    assert output.name == 'out.png'


def test_set_data_round_trips_bytes():
    output = assemble(2, 1, 'out.png')
    data = np.arange(8, dtype=np.uint8)

    output.set_data(data)

    assert np.array_equal(output.data, data)
    assert output.data is not data


def test_set_data_accepts_shorter_data():
    output = assemble(2, 2, 'out.png')

    output.set_data(np.ones(4, dtype=np.uint8))

    assert output.data.size == 4


def test_set_data_rejects_data_over_capacity():
    output = assemble(1, 1, 'out.png')

    with pytest.raises(BufferTooSmall) as excinfo:
        output.set_data(np.zeros(5, dtype=np.uint8))

    assert excinfo.value.details == {'data_size': 5, 'capacity': 4}
    assert output.data.size == 0


def test_output_assembler_raises_buffer_too_small():
    combined = PixelBuffer.from_array(np.zeros((2, 2, 4), dtype=np.uint8))

    with pytest.raises(BufferTooSmall):
        OutputAssembler(1, 1, 'out.png').execute(combined)


def test_output_assembler_wraps_combined_buffer(first_buffer):
    output = OutputAssembler(2, 1, 'out.png').execute(first_buffer)

    assert (output.width, output.height) == (2, 1)
    assert np.array_equal(output.data, first_buffer.data)
