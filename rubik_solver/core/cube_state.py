# rubik_solver/core/cube_state.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Literal, Mapping, Sequence, Tuple

Face = Literal["U", "D", "L", "R", "F", "B"]
Color = str  # Letras: "W", "Y", "O", "R", "G", "B"
Vec3i = Tuple[int, int, int]
CubeHash = Tuple[Tuple[Color, ...], ...]

FACES: Tuple[Face, ...] = ("U", "D", "L", "R", "F", "B")

COLORS_SOLVED: Dict[Face, Color] = {
    "U": "W",
    "D": "Y",
    "L": "O",
    "R": "R",
    "F": "G",
    "B": "B",
}
FACE_OF_COLOR: Dict[Color, Face] = {c: f for f, c in COLORS_SOLVED.items()}

# Código de 3 bits por color para `fingerprint` (7 = color desconocido)
COLOR_CODES: Dict[Color, int] = {COLORS_SOLVED[f]: i for i, f in enumerate(FACES)}

# Normales por cara (x, y, z): x hacia R, y hacia U, z hacia F
FACE_NORMAL: Dict[Face, Vec3i] = {
    "F": (0, 0, 1),
    "B": (0, 0, -1),
    "R": (1, 0, 0),
    "L": (-1, 0, 0),
    "U": (0, 1, 0),
    "D": (0, -1, 0),
}

_FACE_SLOT: Dict[Face, int] = {f: k for k, f in enumerate(FACES)}


def facelet_index(face: Face, i: int) -> int:
    """Índice plano (0..53) del sticker `i` de la cara `face`."""
    return _FACE_SLOT[face] * 9 + i


def _facelet_position(face: Face, i: int) -> Vec3i:
    """Posición del cubie que contiene el sticker `i` de `face`.

    Cada cara se lee fila-columna mirándola desde afuera:
    - F: x=c-1, y=1-r, z=+1
    - B: x=1-c, y=1-r, z=-1   (flip X)
    - R: x=+1, y=1-r, z=1-c   (flip Z)
    - L: x=-1, y=1-r, z=c-1
    - U: x=c-1, y=+1, z=r-1   (fila 0 junto a B)
    - D: x=c-1, y=-1, z=1-r   (fila 0 junto a F)
    """
    r, c = divmod(i, 3)
    if face == "F":
        return (c - 1, 1 - r, 1)
    if face == "B":
        return (1 - c, 1 - r, -1)
    if face == "R":
        return (1, 1 - r, 1 - c)
    if face == "L":
        return (-1, 1 - r, c - 1)
    if face == "U":
        return (c - 1, 1, r - 1)
    if face == "D":
        return (c - 1, -1, 1 - r)
    raise ValueError(f"Cara inválida: {face}")


def _build_geometry() -> Tuple[List[Tuple[Vec3i, Vec3i]], Dict[Tuple[Vec3i, Vec3i], int]]:
    """Mapea cada sticker a (posición, normal) y viceversa."""
    to_pn: List[Tuple[Vec3i, Vec3i]] = []
    from_pn: Dict[Tuple[Vec3i, Vec3i], int] = {}
    for face in FACES:
        n = FACE_NORMAL[face]
        for i in range(9):
            pn = (_facelet_position(face, i), n)
            from_pn[pn] = len(to_pn)
            to_pn.append(pn)
    return to_pn, from_pn


# Mapas: índice plano -> (pos, normal) y viceversa
FACELET_GEOMETRY, GEOMETRY_TO_FACELET = _build_geometry()

SOLVED_FLAT: Tuple[Color, ...] = tuple(COLORS_SOLVED[f] for f in FACES for _ in range(9))


@dataclass(frozen=True)
class CubeState:
    """Estado inmutable de un cubo 3x3 a nivel de stickers (facelets).

    Representación:
        - `faces[k]` son los 9 stickers de la cara `FACES[k]`, fila-columna.
        - Los centros (índice 4) nunca se mueven; se validan, no se guardan aparte.

    Todas las operaciones que "modifican" el cubo devuelven una instancia nueva,
    por lo que los estados se pueden compartir, comparar y usar como clave.
    """

    faces: CubeHash

    # --------------------------
    # Constructores
    # --------------------------
    @classmethod
    def solved(cls) -> CubeState:
        """Devuelve el cubo resuelto (cada cara con su color canónico)."""
        return cls.from_flat(SOLVED_FLAT)

    @classmethod
    def from_faces(cls, mapping: Mapping[Face, Sequence[Color]]) -> CubeState:
        """Construye un estado desde un diccionario cara -> stickers.

        Las caras ausentes quedan vacías; `validate` las reporta.
        """
        return cls(tuple(tuple(mapping.get(f, ())) for f in FACES))

    @classmethod
    def from_flat(cls, facelets: Sequence[Color]) -> CubeState:
        """Construye un estado desde los 54 stickers en el orden de `FACES`.

        Raises:
            ValueError: Si no hay exactamente 54 stickers.
        """
        facelets = tuple(facelets)
        if len(facelets) != 54:
            raise ValueError(f"Se esperaban 54 stickers, hay {len(facelets)}")
        return cls(tuple(facelets[k * 9:(k + 1) * 9] for k in range(6)))

    @classmethod
    def from_string(cls, text: str) -> CubeState:
        """Construye un estado desde 54 letras de color (se ignoran espacios)."""
        return cls.from_flat("".join(text.split()))

    # --------------------------
    # Public API
    # --------------------------
    @cached_property
    def flat(self) -> Tuple[Color, ...]:
        """Los stickers de todas las caras, concatenados en el orden de `FACES`."""
        return tuple(c for stickers in self.faces for c in stickers)

    def face(self, face: Face) -> Tuple[Color, ...]:
        """Devuelve los 9 stickers de una cara.

        Args:
            face: Cara a consultar ("U", "D", "L", "R", "F" o "B").

        Returns:
            Tupla con los stickers en orden de lectura (fila por fila).
        """
        return self.faces[_FACE_SLOT[face]]

    def to_hashable(self) -> CubeHash:
        """Devuelve el estado como estructura inmutable y hasheable.

        Returns:
            Tupla de tuplas con los 9 stickers por cara, en el orden de `FACES`.
        """
        return self.faces

    def to_string(self) -> str:
        """Serializa el estado como 54 letras de color (inverso de `from_string`)."""
        return "".join(self.flat)

    def is_solved(self) -> bool:
        """Indica si el cubo está resuelto (cada cara con un solo color).

        Como los centros no se mueven, "cara monocolor" equivale a "cara del
        color de su centro canónico".
        """
        for f, stickers in zip(FACES, self.faces):
            if len(stickers) != 9 or any(x != COLORS_SOLVED[f] for x in stickers):
                return False
        return True

    def validate(self) -> List[str]:
        """Chequea los invariantes estructurales del estado.

        No verifica que el estado sea alcanzable (ver `core.parity`).

        Returns:
            Lista de invariantes violados; vacía si el estado es válido.
        """
        violations: List[str] = []
        if len(self.faces) != len(FACES):
            violations.append(f"El cubo tiene {len(self.faces)} caras, se esperaban 6")

        counts: Counter = Counter()
        for f, stickers in zip(FACES, self.faces):
            if len(stickers) != 9:
                violations.append(f"La cara {f} tiene {len(stickers)} stickers, se esperaban 9")
            for i, color in enumerate(stickers):
                if color not in COLOR_CODES:
                    violations.append(f"Color inválido {color!r} en la cara {f}, posición {i}")
                else:
                    counts[color] += 1

        for f in FACES:
            color = COLORS_SOLVED[f]
            if counts[color] != 9:
                violations.append(f"El color {color} aparece {counts[color]} veces, debería aparecer 9")

        for f, stickers in zip(FACES, self.faces):
            if len(stickers) > 4 and stickers[4] != COLORS_SOLVED[f]:
                violations.append(
                    f"El centro de la cara {f} debería ser {COLORS_SOLVED[f]}, es {stickers[4]}"
                )
        return violations

    def fingerprint(self) -> int:
        """Clave entera de ancho fijo (3 bits por sticker, 162 bits).

        Es inyectiva sobre estados válidos. Aun así, nadie decide "resuelto" por
        la huella: el resultado final se verifica contra el estado real.
        """
        value = 0
        for color in self.flat:
            value = (value << 3) | COLOR_CODES.get(color, 7)
        return value

    def to_net(self) -> str:
        """Dibuja el cubo desplegado en texto (U arriba, L F R B al medio, D abajo)."""

        def row(face: Face, r: int) -> str:
            return " ".join(self.face(face)[r * 3:r * 3 + 3])

        pad = " " * 6
        lines = [pad + row("U", r) for r in range(3)]
        lines += [" ".join(row(f, r) for f in ("L", "F", "R", "B")) for r in range(3)]
        lines += [pad + row("D", r) for r in range(3)]
        return "\n".join(lines)
