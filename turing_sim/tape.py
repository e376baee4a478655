from __future__ import annotations

from typing import Dict

from .definition import DEFAULT_BLANK, HeadStartPolicy


class Tape:
    """Implementación de una cinta infinita hacia ambos lados.

    Solo se guarda la ventana escrita ``min_index..max_index``; cualquier
    otra celda se lee como el símbolo en blanco.
    """

    def __init__(self, blank_symbol: str = DEFAULT_BLANK, initial_input: str = "") -> None:
        self.blank_symbol = blank_symbol
        self.cells: Dict[int, str] = {}
        self.min_index = 0
        self.max_index = -1
        self.head_start = 0
        for index, symbol in enumerate(initial_input):
            self.cells[index] = symbol
            self.max_index = index

    @classmethod
    def from_string(
        cls,
        text: str,
        blank_symbol: str = DEFAULT_BLANK,
        policy: HeadStartPolicy = HeadStartPolicy.FROM_LEFTMOST_SYMBOL,
    ) -> "Tape":
        tape = cls(blank_symbol, text)
        tape.head_start = tape.start_index(policy)
        return tape

    def __len__(self) -> int:
        return self.max_index - self.min_index + 1

    def start_index(self, policy: HeadStartPolicy) -> int:
        if policy is HeadStartPolicy.FROM_RIGHTMOST_SYMBOL:
            return max(self.max_index, 0)
        return self.min_index

    def read(self, position: int) -> str:
        return self.cells.get(position, self.blank_symbol)

    def write(self, position: int, symbol: str) -> None:
        if len(self) == 0:
            self.min_index = self.max_index = position
        else:
            for index in range(position, self.min_index):
                self.cells[index] = self.blank_symbol
            for index in range(self.max_index + 1, position):
                self.cells[index] = self.blank_symbol
            self.min_index = min(self.min_index, position)
            self.max_index = max(self.max_index, position)
        self.cells[position] = symbol

    def is_beyond_window(self, position: int) -> bool:
        return position < self.min_index or position > self.max_index

    def render(self) -> str:
        return "".join(self.read(index) for index in range(self.min_index, self.max_index + 1))

    def view(self, head_position: int, radius: int = 3) -> str:
        start = min(self.min_index, head_position) - radius
        end = max(self.max_index, head_position) + radius
        cells = []
        for index in range(start, end + 1):
            symbol = self.read(index)
            if index == head_position:
                cells.append(f"[{symbol}]")
            else:
                cells.append(symbol)
        return "".join(cells)
