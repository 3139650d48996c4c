import random
import string

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class RowGenerator:
    """Random rows for the bloat table.

    Every value is drawn from the ``rng`` passed in, so a seeded
    ``random.Random`` reproduces identifiers, payloads and the sequence of
    update samples.
    """

    ALPHABET = string.ascii_letters + string.digits

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def random_value(self) -> int:
        return self.rng.randint(INT64_MIN, INT64_MAX)

    def generate_ids(self, count: int) -> list[int]:
        seen: set[int] = set()
        ids: list[int] = []
        while len(ids) < count:
            value = self.random_value()
            if value in seen:
                continue
            seen.add(value)
            ids.append(value)
        return ids

    def generate_payload(self, size: int) -> str:
        return "".join(self.rng.choices(self.ALPHABET, k=size))

    def generate_rows(
        self, ids: list[int], payload_size: int
    ) -> list[tuple[int, str, int]]:
        return [
            (row_id, self.generate_payload(payload_size), self.random_value())
            for row_id in ids
        ]

    def sample_updates(self, ids: list[int], count: int) -> list[tuple[int, int]]:
        # (rnd, id) pairs, in UPDATE parameter order
        return [(self.random_value(), row_id) for row_id in self.rng.sample(ids, count)]
