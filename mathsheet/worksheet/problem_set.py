"""
Problem set store - ordered problems with an id index and a selection cursor.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from mathsheet.worksheet.models import Problem


class ProblemSet:
    """
    Ordered collection of generated problems.

    Order is insertion order. Replacement keeps the position, removal
    compacts. Ids are unique at all times; operations that would break that
    raise ValueError instead of silently duplicating.
    """

    def __init__(self, problems: Iterable[Problem] = ()):
        self._items: List[Problem] = []
        self._index: Dict[str, Problem] = {}
        self._selected_id: Optional[str] = None
        self.replace_all(problems)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Problem]:
        return iter(tuple(self._items))

    def __contains__(self, problem_id: object) -> bool:
        return problem_id in self._index

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def get(self, problem_id: str) -> Optional[Problem]:
        return self._index.get(problem_id)

    def index_of(self, problem_id: str) -> int:
        """Position of ``problem_id``, or -1 when absent."""
        if problem_id not in self._index:
            return -1
        for position, problem in enumerate(self._items):
            if problem.id == problem_id:
                return position
        return -1

    def snapshot(self) -> Tuple[Problem, ...]:
        return tuple(self._items)

    def replace_all(self, problems: Iterable[Problem]) -> None:
        """Swap the whole set and clear the cursor."""
        items = list(problems)
        index = {p.id: p for p in items}
        if len(index) != len(items):
            raise ValueError("problem set contains duplicate ids")
        self._items = items
        self._index = index
        self._selected_id = None

    def replace_by_id(self, problem_id: str, new_problem: Problem) -> bool:
        """
        Put ``new_problem`` where ``problem_id`` was and make it the selection.

        Returns False (and changes nothing) when ``problem_id`` is absent.
        """
        position = self.index_of(problem_id)
        if position < 0:
            return False
        if new_problem.id != problem_id and new_problem.id in self._index:
            raise ValueError(f"duplicate problem id {new_problem.id}")

        self._items[position] = new_problem
        del self._index[problem_id]
        self._index[new_problem.id] = new_problem
        self._selected_id = new_problem.id
        return True

    def remove_by_id(self, problem_id: str) -> bool:
        position = self.index_of(problem_id)
        if position < 0:
            return False
        del self._items[position]
        del self._index[problem_id]
        if self._selected_id == problem_id:
            self._selected_id = None
        return True

    def select(self, problem_id: Optional[str]) -> Optional[str]:
        """Expand ``problem_id``; selecting the active one collapses it."""
        if problem_id is None or problem_id == self._selected_id:
            self._selected_id = None
        elif problem_id in self._index:
            self._selected_id = problem_id
        return self._selected_id
