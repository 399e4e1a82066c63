"""Force field engine: energy and gradient aggregation and minimization."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from .. import geometry
from ..parallel import ParallelBackend, get_backend
from .atom import ForceFieldAtom
from .calculation import NUMERICAL_GRADIENT_STEP, ForceFieldCalculation

if TYPE_CHECKING:
    from ..parallel.dispatcher import BackendType
    from ..topology import Atom, Molecule

logger = logging.getLogger(__name__)

# Calculation count at which energy() switches to the parallel backend
PARALLEL_THRESHOLD = 5000


class ForceFieldFlags(enum.IntFlag):
    """Capability flags of a force field."""

    NONE = 0
    ANALYTICAL_GRADIENT = 0x01


@dataclass(frozen=True)
class MinimizationSettings:
    """
    Line search constants used by ForceField.minimization_step.

    Attributes:
        initial_step: Step size at the start of every outer step.
        max_step: Upper bound of the step size.
        step_growth: Step size factor after an accepted move.
        step_shrink: Step size factor after a rejected move.
        max_line_search_iterations: Inner iterations per outer step.
        energy_convergence: An accepted move improving the energy by less
            than this ends the line search.
    """

    initial_step: float = 0.05
    max_step: float = 1.0
    step_growth: float = 2.0
    step_shrink: float = 0.1
    max_line_search_iterations: int = 10
    energy_convergence: float = 1e-5

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.initial_step <= 0 or self.max_step <= 0:
            raise ValueError("Step sizes must be positive")
        if self.initial_step > self.max_step:
            raise ValueError(
                f"initial_step {self.initial_step} exceeds max_step {self.max_step}"
            )
        if self.step_growth <= 1.0:
            raise ValueError(f"step_growth must be > 1, got {self.step_growth}")
        if not 0.0 < self.step_shrink < 1.0:
            raise ValueError(f"step_shrink must be in (0, 1), got {self.step_shrink}")
        if self.max_line_search_iterations < 1:
            raise ValueError("max_line_search_iterations must be at least 1")


def _sum_energies(calculations: Sequence[ForceFieldCalculation]) -> float:
    energy = 0.0
    for calculation in calculations:
        energy += calculation.energy()
    return energy


class ForceField(ABC):
    """
    Generic molecular mechanics force field.

    A force field owns a list of ForceFieldAtoms and ForceFieldCalculations
    built by setup() from the molecules added to it. The total energy is
    the sum of the calculations' energies.

    Calculations whose setup failed are skipped by energy(), gradient() and
    numerical_gradient(); is_setup reports whether every calculation
    succeeded.

    Structural changes (adding or removing atoms, calculations or molecules)
    must not overlap a running energy, gradient or minimization call,
    including one started with minimization_step_async().

    Example:
        ff = ForceField.create("uff")
        ff.add_molecule(molecule)
        if not ff.setup():
            print(ff.error_string)
        energy = ff.energy()
        while not ff.minimization_step(0.1):
            pass
        ff.write_coordinates(molecule)
    """

    def __init__(
        self,
        name: str,
        *,
        flags: ForceFieldFlags = ForceFieldFlags.NONE,
        parallel_threshold: int = PARALLEL_THRESHOLD,
        backend: BackendType | ParallelBackend = "threads",
        rng: np.random.Generator | None = None,
        settings: MinimizationSettings | None = None,
    ) -> None:
        """
        Initialize force field.

        Args:
            name: Force field name.
            flags: Capability flags.
            parallel_threshold: Calculation count at which energy() is
                evaluated with ``backend`` instead of sequentially.
            backend: Parallel backend for large systems. A backend created
                from a name is closed by close(); an instance is left open.
            rng: Random source for divergence recovery. Defaults to a fresh,
                unseeded generator.
            settings: Minimization line search settings.
        """
        if parallel_threshold < 0:
            raise ValueError(f"parallel_threshold must be >= 0, got {parallel_threshold}")

        self._name = name
        self._flags = ForceFieldFlags(flags)
        self._atoms: list[ForceFieldAtom] = []
        self._atom_map: dict[int, ForceFieldAtom] = {}
        self._calculations: list[ForceFieldCalculation] = []
        self._molecules: list[Molecule] = []
        self._parameter_sets: dict[str, Callable[[], Any]] = {}
        self._parameter_set = ""
        self._error_string = ""

        self.parallel_threshold = parallel_threshold
        self._backend = get_backend(backend)
        # backends created from a name are closed with the force field
        self._owns_backend = isinstance(backend, str)
        self._rng = rng if rng is not None else np.random.default_rng()
        self.settings = settings if settings is not None else MinimizationSettings()
        self._executor: ThreadPoolExecutor | None = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, atoms={len(self._atoms)}, "
            f"calculations={len(self._calculations)})"
        )

    def __enter__(self) -> ForceField:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """
        Shut down the worker thread used by minimization_step_async() and the
        parallel backend if it was created from a name.
        """
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._owns_backend:
            self._backend.close()

    # --- Properties -------------------------------------------------------- #

    @property
    def name(self) -> str:
        """Return the name of the force field."""
        return self._name

    @property
    def flags(self) -> ForceFieldFlags:
        """Return the capability flags."""
        return self._flags

    def set_flags(self, flags: ForceFieldFlags) -> None:
        self._flags = ForceFieldFlags(flags)

    @property
    def backend(self) -> ParallelBackend:
        """Return the backend used for large energy evaluations."""
        return self._backend

    # --- Atoms ------------------------------------------------------------- #

    @property
    def atoms(self) -> list[ForceFieldAtom]:
        """Return the atoms in index order."""
        return list(self._atoms)

    @property
    def atom_count(self) -> int:
        """Return the number of atoms."""
        return len(self._atoms)

    def atom(self, index: int) -> ForceFieldAtom:
        """Return the atom at ``index``."""
        if index < 0 or index >= len(self._atoms):
            raise IndexError(f"Atom index {index} out of range [0, {len(self._atoms)})")
        return self._atoms[index]

    def atom_for(self, atom: Atom) -> ForceFieldAtom | None:
        """Return the force field atom representing structural ``atom``, or None."""
        return self._atom_map.get(id(atom))

    def add_atom(self, atom: ForceFieldAtom) -> None:
        """
        Append an atom to the force field.

        Raises:
            ValueError: If the atom belongs to another force field or its
                structural atom is already represented.
        """
        if atom.force_field is not self:
            raise ValueError("Atom was created for a different force field")
        if id(atom.atom) in self._atom_map:
            raise ValueError("Structural atom is already represented in the force field")

        atom.index = len(self._atoms)
        self._atoms.append(atom)
        self._atom_map[id(atom.atom)] = atom

    def remove_atom(self, atom: ForceFieldAtom) -> None:
        """
        Remove an atom that no calculation refers to.

        Raises:
            ValueError: If the atom is not present or still in use.
        """
        if not self._owns(atom):
            raise ValueError("Atom is not part of this force field")
        if any(calculation.contains(atom) for calculation in self._calculations):
            raise ValueError("Atom is still referenced by a calculation")

        del self._atoms[atom.index]
        del self._atom_map[id(atom.atom)]
        atom.index = -1
        for index, remaining in enumerate(self._atoms):
            remaining.index = index

    def _owns(self, atom: ForceFieldAtom) -> bool:
        return 0 <= atom.index < len(self._atoms) and self._atoms[atom.index] is atom

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return a copy of the engine-local positions, shape (N, 3)."""
        if not self._atoms:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([atom.position for atom in self._atoms])

    def set_positions(self, positions: NDArray[np.floating]) -> None:
        """
        Set all engine-local positions.

        Raises:
            ValueError: If the shape is not (atom_count, 3).
        """
        positions = np.asarray(positions, dtype=np.float64)
        if positions.shape != (len(self._atoms), 3):
            raise ValueError(
                f"positions shape {positions.shape} incompatible with "
                f"{len(self._atoms)} atoms"
            )
        for atom, position in zip(self._atoms, positions):
            atom.set_position(position)

    # --- Molecules --------------------------------------------------------- #

    def add_molecule(self, molecule: Molecule) -> None:
        """Add a molecule. Atoms and calculations are created by setup()."""
        if any(member is molecule for member in self._molecules):
            return
        self._molecules.append(molecule)

    def remove_molecule(self, molecule: Molecule) -> None:
        """
        Remove a molecule.

        Raises:
            ValueError: If the molecule was not added.
        """
        self._molecules.remove(molecule)

    @property
    def molecules(self) -> list[Molecule]:
        """Return the molecules added to the force field."""
        return list(self._molecules)

    @property
    def molecule_count(self) -> int:
        """Return the number of molecules."""
        return len(self._molecules)

    def clear(self) -> None:
        """Remove all molecules, calculations and atoms."""
        self._molecules.clear()
        self._reset()

    def _reset(self) -> None:
        for calculation in self._calculations:
            calculation.force_field = None
        self._calculations.clear()
        for atom in self._atoms:
            atom.index = -1
        self._atoms.clear()
        self._atom_map.clear()

    # --- Setup ------------------------------------------------------------- #

    @abstractmethod
    def setup(self) -> bool:
        """
        Create atoms and calculations for every molecule and parameterize them.

        Returns:
            True if every calculation was set up; otherwise False, with
            error_string describing the failure.
        """
        ...

    @property
    def is_setup(self) -> bool:
        """Return True if every calculation is set up."""
        return all(calculation.is_setup for calculation in self._calculations)

    def _load_parameters(self) -> Any | None:
        """
        Load the selected parameter set.

        Returns:
            The parameter object, or None after recording an error.
        """
        if not self._parameter_set:
            self.set_error_string("No parameter set selected")
            return None

        loader = self._parameter_sets[self._parameter_set]
        try:
            return loader()
        except (OSError, ValueError, KeyError, TypeError) as exc:
            self.set_error_string(f"Failed to load parameters: {exc}")
            logger.error("Failed to load parameter set %r: %s", self._parameter_set, exc)
            return None

    def _setup_calculations(self, parameters: Any) -> bool:
        """Run setup() on every calculation and record the outcome."""
        failed = []
        for calculation in self._calculations:
            ok = calculation.setup(parameters)
            self.set_calculation_setup(calculation, ok)
            if not ok:
                failed.append(calculation)

        if failed:
            for calculation in failed:
                logger.warning(
                    "No parameters for %r with types %s",
                    calculation,
                    "-".join(atom.type or "?" for atom in calculation.atoms),
                )
            self.set_error_string(
                f"{len(failed)} of {len(self._calculations)} calculations could not be "
                f"set up, first: {failed[0]!r}"
            )
            return False

        logger.info(
            "%s set up %d atoms and %d calculations",
            self._name,
            len(self._atoms),
            len(self._calculations),
        )
        return True

    # --- Parameters -------------------------------------------------------- #

    def add_parameter_set(self, name: str, loader: Callable[[], Any]) -> None:
        """Register a named parameter set; ``loader`` returns the parameter object."""
        self._parameter_sets[name] = loader

    def remove_parameter_set(self, name: str) -> None:
        """Remove a named parameter set."""
        self._parameter_sets.pop(name, None)
        if self._parameter_set == name:
            self._parameter_set = ""

    def set_parameter_set(self, name: str) -> bool:
        """Select a parameter set. Returns False if ``name`` is unknown."""
        if name not in self._parameter_sets:
            return False
        self._parameter_set = name
        return True

    @property
    def parameter_set(self) -> str:
        """Return the name of the selected parameter set."""
        return self._parameter_set

    @property
    def parameter_sets(self) -> list[str]:
        """Return the names of all registered parameter sets."""
        return sorted(self._parameter_sets)

    # --- Calculations ------------------------------------------------------ #

    def add_calculation(self, calculation: ForceFieldCalculation) -> None:
        """
        Append a calculation.

        Raises:
            ValueError: If any of its atoms is not owned by this force field.
        """
        for atom in calculation.atoms:
            if atom.force_field is not self or not self._owns(atom):
                raise ValueError(f"{calculation!r} refers to an atom not in the force field")
        calculation.force_field = self
        self._calculations.append(calculation)

    def remove_calculation(self, calculation: ForceFieldCalculation) -> None:
        """
        Remove a calculation and detach it from the force field.

        Raises:
            ValueError: If the calculation is not present.
        """
        self._calculations.remove(calculation)
        calculation.force_field = None
        calculation._set_setup(False)

    @property
    def calculations(self) -> list[ForceFieldCalculation]:
        """Return all calculations."""
        return list(self._calculations)

    @property
    def calculation_count(self) -> int:
        """Return the number of calculations."""
        return len(self._calculations)

    def set_calculation_setup(self, calculation: ForceFieldCalculation, setup: bool) -> None:
        """Record whether ``calculation`` was set up successfully."""
        calculation._set_setup(setup)

    def _active_calculations(self) -> list[ForceFieldCalculation]:
        return [calculation for calculation in self._calculations if calculation.is_setup]

    # --- Energy and gradient ----------------------------------------------- #

    def energy(self) -> float:
        """
        Return the total energy in kcal/mol.

        Below ``parallel_threshold`` calculations the energies are summed in
        list order. At or above it they are evaluated with the parallel
        backend and summed per chunk, so the last bits of the result may
        depend on the number of workers.
        """
        calculations = self._active_calculations()

        if len(self._calculations) < self.parallel_threshold:
            return float(_sum_energies(calculations))

        return float(self._backend.map_reduce(_sum_energies, calculations))

    def gradient(self) -> NDArray[np.floating]:
        """
        Return dE/dx for every atom, shape (atom_count, 3).

        Uses the calculations' analytic gradients when the force field has
        the ANALYTICAL_GRADIENT flag, and numerical_gradient() otherwise.
        """
        if not self._flags & ForceFieldFlags.ANALYTICAL_GRADIENT:
            return self.numerical_gradient()

        gradient = np.zeros((len(self._atoms), 3), dtype=np.float64)

        for calculation in self._active_calculations():
            atom_gradients = calculation.gradient()
            for atom, atom_gradient in zip(calculation.atoms, atom_gradients):
                gradient[atom.index] += atom_gradient

        return gradient

    def numerical_gradient(self, step: float = NUMERICAL_GRADIENT_STEP) -> NDArray[np.floating]:
        """
        Return the gradient estimated by forward differences.

        Each atom is moved along x, y and z in turn and restored; the change
        in the energy of the calculations containing it, divided by the
        displacement, gives the gradient component.

        Args:
            step: Displacement in Angstrom.
        """
        gradient = np.zeros((len(self._atoms), 3), dtype=np.float64)

        members: list[list[ForceFieldCalculation]] = [[] for _ in self._atoms]
        for calculation in self._active_calculations():
            for atom in calculation.atoms:
                members[atom.index].append(calculation)

        for atom in self._atoms:
            calculations = members[atom.index]
            if not calculations:
                continue

            original = atom.position.copy()
            initial_energy = _sum_energies(calculations)

            for axis in range(3):
                displaced = original.copy()
                displaced[axis] += step
                atom.set_position(displaced)
                final_energy = _sum_energies(calculations)
                gradient[atom.index, axis] = (final_energy - initial_energy) / (
                    displaced[axis] - original[axis]
                )

            atom.set_position(original)

        return gradient

    def largest_gradient(self) -> float:
        """Return the magnitude of the largest per-atom gradient."""
        if not self._atoms:
            return 0.0
        return float(np.max(np.linalg.norm(self.gradient(), axis=1)))

    def root_mean_square_gradient(self) -> float:
        """Return sqrt(sum |g_i|^2 / (3 N))."""
        if not self._atoms:
            return 0.0
        gradient = self.gradient()
        return float(np.sqrt(np.sum(gradient**2) / (3.0 * len(self._atoms))))

    # --- Coordinates ------------------------------------------------------- #

    def read_coordinates(self, molecule: Molecule | None = None) -> None:
        """
        Copy positions from structural atoms into the force field.

        Args:
            molecule: Molecule to read. None reads every added molecule.
        """
        molecules = self._molecules if molecule is None else [molecule]
        for current in molecules:
            for atom in current.atoms:
                self.read_atom_coordinates(atom)

    def read_atom_coordinates(self, atom: Atom) -> None:
        """Copy the position of one structural atom into the force field."""
        ff_atom = self.atom_for(atom)
        if ff_atom is not None:
            ff_atom.set_position(atom.position)

    def write_coordinates(self, molecule: Molecule | None = None) -> None:
        """
        Copy force field positions back to structural atoms.

        Args:
            molecule: Molecule to write. None writes every added molecule.
        """
        molecules = self._molecules if molecule is None else [molecule]
        for current in molecules:
            for atom in current.atoms:
                self.write_atom_coordinates(atom)

    def write_atom_coordinates(self, atom: Atom) -> None:
        """Copy the force field position of one atom back to the structural atom."""
        ff_atom = self.atom_for(atom)
        if ff_atom is not None:
            atom.set_position(ff_atom.position)

    # --- Energy minimization ----------------------------------------------- #

    def minimization_step(self, tolerance: float) -> bool:
        """
        Perform one steepest descent step with an adaptive line search.

        The gradient is computed once. Atoms are then moved along
        -gradient * step for at most ``max_line_search_iterations`` trials:
        a lower energy is accepted and the step doubled (up to max_step),
        a higher energy is undone and the step shrunk. An accepted move that
        improves the energy by less than ``energy_convergence`` ends the
        search. A NaN energy restores the positions, displaces every atom
        by a random unit vector and recomputes the gradient.

        Args:
            tolerance: Convergence threshold on the RMS gradient.

        Returns:
            True if the RMS gradient is below ``tolerance`` afterwards.
        """
        settings = self.settings

        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            gradient = self.gradient()
            step = settings.initial_step
            initial_energy = self.energy()

            for iteration in range(settings.max_line_search_iterations):
                initial_positions = self.positions
                for atom in self._atoms:
                    atom.move_by(-gradient[atom.index] * step)

                final_energy = self.energy()

                if np.isnan(final_energy):
                    logger.warning(
                        "Energy diverged at step size %g, perturbing atom positions", step
                    )
                    for atom in self._atoms:
                        atom.set_position(initial_positions[atom.index])
                        atom.move_by(self._random_unit_vector())
                    gradient = self.gradient()
                    continue

                if final_energy < initial_energy and initial_energy - final_energy < (
                    settings.energy_convergence
                ):
                    logger.debug(
                        "Line search converged after %d iterations at E=%.6f",
                        iteration + 1,
                        final_energy,
                    )
                    break
                elif final_energy < initial_energy:
                    logger.debug("Accepted step %g: E %.6f -> %.6f", step, initial_energy, final_energy)
                    step = min(step * settings.step_growth, settings.max_step)
                    initial_energy = final_energy
                else:
                    logger.debug("Rejected step %g: E %.6f -> %.6f", step, initial_energy, final_energy)
                    for atom in self._atoms:
                        atom.set_position(initial_positions[atom.index])
                    step *= settings.step_shrink

            return self.root_mean_square_gradient() < tolerance

    def minimization_step_async(self, tolerance: float) -> Future[bool]:
        """
        Run minimization_step() on a background thread.

        The returned future resolves to the convergence flag. The force field
        must not be modified or evaluated until the future completes.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix=f"{self._name}-minimizer"
            )
        return self._executor.submit(self.minimization_step, tolerance)

    def minimize(
        self,
        tolerance: float = 0.1,
        max_steps: int = 1000,
        write_back: bool = True,
    ) -> bool:
        """
        Call minimization_step() until convergence or ``max_steps``.

        Args:
            tolerance: Convergence threshold on the RMS gradient.
            max_steps: Maximum number of outer steps.
            write_back: Copy the final positions to the molecules.

        Returns:
            True if converged.
        """
        converged = False
        steps = 0
        for steps in range(1, max_steps + 1):
            if self.minimization_step(tolerance):
                converged = True
                break

        logger.info(
            "%s minimization %s after %d steps, E=%.6f",
            self._name,
            "converged" if converged else "stopped",
            steps,
            self.energy(),
        )

        if write_back:
            self.write_coordinates()
        return converged

    def _random_unit_vector(self) -> NDArray[np.floating]:
        while True:
            vector = self._rng.normal(size=3)
            length = np.linalg.norm(vector)
            if length > 1e-12:
                return vector / length

    # --- Geometry ---------------------------------------------------------- #

    def distance(self, a: ForceFieldAtom, b: ForceFieldAtom) -> float:
        """Return the distance between two atoms."""
        return geometry.distance(a.position, b.position)

    def bond_angle(self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom) -> float:
        """Return the angle a-b-c in degrees."""
        return geometry.bond_angle(a.position, b.position, c.position)

    def bond_angle_radians(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom
    ) -> float:
        """Return the angle a-b-c in radians."""
        return geometry.bond_angle_radians(a.position, b.position, c.position)

    def torsion_angle(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the torsion angle a-b-c-d in degrees."""
        return geometry.torsion_angle(a.position, b.position, c.position, d.position)

    def torsion_angle_radians(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the torsion angle a-b-c-d in radians."""
        return geometry.torsion_angle_radians(a.position, b.position, c.position, d.position)

    def wilson_angle(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the out-of-plane angle of b-d from plane a-b-c in degrees."""
        return geometry.wilson_angle(a.position, b.position, c.position, d.position)

    def wilson_angle_radians(
        self, a: ForceFieldAtom, b: ForceFieldAtom, c: ForceFieldAtom, d: ForceFieldAtom
    ) -> float:
        """Return the out-of-plane angle of b-d from plane a-b-c in radians."""
        return geometry.wilson_angle_radians(a.position, b.position, c.position, d.position)

    # --- Error handling ---------------------------------------------------- #

    @property
    def error_string(self) -> str:
        """Return a description of the last error."""
        return self._error_string

    def set_error_string(self, error_string: str) -> None:
        """Set the description of the last error."""
        self._error_string = error_string

    # --- Static methods ---------------------------------------------------- #

    @staticmethod
    def create(name: str, **kwargs: Any) -> ForceField | None:
        """Create a force field by name, or return None if ``name`` is unknown."""
        from .registry import create_force_field

        return create_force_field(name, **kwargs)

    @staticmethod
    def force_fields() -> list[str]:
        """Return the names of all available force fields."""
        from .registry import force_field_names

        return force_field_names()
