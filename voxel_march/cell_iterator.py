# --- voxel_march/cell_iterator.py (Zeilenweises Durchlaufen der Zellursprünge) ---


class CellIterator:
    """
    Linearer Iterator über einen 3D-Koordinatenbereich, min und max inklusive.

    x läuft am schnellsten, dann y, dann z. Dieselbe Instanz wird über
    reset() für jeden Durchlauf wiederverwendet.
    """

    def __init__(self, minimum, maximum):
        self.min = tuple(int(c) for c in minimum)
        self.max = tuple(int(c) for c in maximum)
        self.track = list(self.min)

    @classmethod
    def for_chunk(cls, size):
        """Alle Zellursprünge eines Chunks: [0, size-2] pro Achse."""
        last = int(size) - 2
        return cls((0, 0, 0), (last, last, last))

    def reset(self):
        self.track = list(self.min)

    def __iter__(self):
        return self

    def __next__(self):
        track = self.track
        ret = (track[0], track[1], track[2])

        if track[2] > self.max[2]:
            raise StopIteration

        if track[0] >= self.max[0]:
            track[1] += 1
            track[0] = self.min[0]
        else:
            track[0] += 1
            return ret

        if track[1] > self.max[1]:
            track[2] += 1
            track[1] = self.min[1]

        return ret

    @property
    def exhausted(self):
        return self.track[2] > self.max[2]

    def __len__(self):
        """Anzahl aller Koordinaten im Bereich (nicht die verbleibende)."""
        count = 1
        for lo, hi in zip(self.min, self.max):
            count *= max(hi - lo + 1, 0)
        return count

    def __repr__(self):
        return f"CellIterator(min={self.min}, max={self.max}, track={tuple(self.track)})"
