"""Independent rule checks used to cross-check the engine in tests."""


def assert_valid_solution(board, size):
    half = size // 2
    assert len(board) == size and all(len(row) == size for row in board)
    columns = [[board[r][c] for r in range(size)] for c in range(size)]
    for line in list(board) + columns:
        line = list(line)
        assert line.count(1) == half, f"unbalanced line {line}"
        assert line.count(2) == half, f"unbalanced line {line}"
        for i in range(2, size):
            assert not (line[i] == line[i - 1] == line[i - 2]), f"triple in {line}"
    assert len({tuple(row) for row in board}) == size, "duplicate rows"
    assert len({tuple(col) for col in columns}) == size, "duplicate columns"
