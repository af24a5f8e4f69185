from .structure import StructureMatrix, algo_structure_matrix
