# src/atlas_compute/algorithms/graph/connected_components.py
"""
ConnectedComponents — componentes fracamente ou fortemente conexos.

Modos:
    - directed=False (padrão): componentes fracamente conexos por BFS,
      expandindo pela união de vizinhos de saída e de entrada
    - directed=True: componentes fortemente conexos por Tarjan **iterativo**

O Tarjan usa uma pilha explícita de frames `(nó, iterador de vizinhos)` em
vez da pilha de chamadas do Python, então a profundidade do grafo não é
limitada pelo recursion limit. Quando o iterador de um frame se esgota sem
empilhar filho, o frame sai da pilha, propaga seu low-link ao pai e, se
`low[nó] == disc[nó]`, desempilha o componente até o próprio nó.

Saída:
    - grafo novo com a propriedade inteira `componentId` em cada nó
    - métricas: componentCount, largestComponentSize, componentSizes
      (componentId → tamanho), nodeCount, directed
    - grafo vazio ⇒ apenas métricas, com contagens zeradas

Cancelamento e progresso são verificados/reportados uma vez por raiz de
busca (`raízes processadas / n`).
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterator, List, Tuple

from atlas_compute.core.algorithm.base import GraphAlgorithm
from atlas_compute.core.algorithm.context import ExecutionContext
from atlas_compute.core.algorithm.types import AlgorithmOutput, ParameterDescriptor
from atlas_compute.core.datasets.types import GraphDataset

COMPONENT_PROPERTY = "componentId"


class ConnectedComponentsAlgorithm(GraphAlgorithm):
    name = "ConnectedComponents"
    description = "Finds connected components (weakly or strongly connected) in a graph."
    output_suffix = "Components"
    parameters = (
        ParameterDescriptor(
            "directed",
            "If true, find strongly connected components (Tarjan). Otherwise weakly connected (BFS).",
            bool,
            False,
            False,
        ),
    )

    def _execute_graph(self, dataset: GraphDataset, context: ExecutionContext) -> AlgorithmOutput:
        directed = context.get("directed", False)
        node_ids = list(dataset.node_ids())
        n = len(node_ids)

        if n == 0:
            return AlgorithmOutput(
                metrics={
                    "componentCount": 0,
                    "largestComponentSize": 0,
                    "componentSizes": {},
                    "nodeCount": 0,
                    "directed": directed,
                }
            )

        index = {node_id: i for i, node_id in enumerate(node_ids)}
        if directed:
            components = self._strong(dataset, node_ids, index, context)
        else:
            components = self._weak(dataset, node_ids, index, context)

        sizes: Dict[int, int] = {}
        for cid in components:
            sizes[cid] = sizes.get(cid, 0) + 1

        assignment = {node_id: components[i] for i, node_id in enumerate(node_ids)}
        output = self._copy_with_node_property(
            dataset, self._resolve_output_name(dataset, context), COMPONENT_PROPERTY, assignment
        )

        return AlgorithmOutput(
            output_dataset=output,
            metrics={
                "componentCount": len(sizes),
                "largestComponentSize": max(sizes.values()),
                "componentSizes": dict(sorted(sizes.items())),
                "nodeCount": n,
                "directed": directed,
            },
        )

    # -----------------------------
    # Fracamente conexos (BFS)
    # -----------------------------
    @staticmethod
    def _weak(
        dataset: GraphDataset,
        node_ids: List[str],
        index: Dict[str, int],
        context: ExecutionContext,
    ) -> List[int]:
        n = len(node_ids)
        components = [-1] * n
        current = 0
        queue: deque = deque()

        for root in range(n):
            if components[root] >= 0:
                continue
            context.raise_if_cancelled()

            components[root] = current
            queue.append(root)
            while queue:
                node = queue.popleft()
                for neighbor in dataset.neighbors(node_ids[node]):
                    j = index.get(neighbor)
                    if j is None or components[j] >= 0:
                        continue
                    components[j] = current
                    queue.append(j)

            current += 1
            context.report_progress((root + 1) / n)

        return components

    # -----------------------------
    # Fortemente conexos (Tarjan iterativo)
    # -----------------------------
    @staticmethod
    def _strong(
        dataset: GraphDataset,
        node_ids: List[str],
        index: Dict[str, int],
        context: ExecutionContext,
    ) -> List[int]:
        n = len(node_ids)
        components = [-1] * n
        disc = [-1] * n
        low = [-1] * n
        on_stack = [False] * n
        scc_stack: List[int] = []
        time = 0
        component_id = 0

        def successors(node: int) -> Iterator[int]:
            for neighbor in dataset.out_neighbors(node_ids[node]):
                j = index.get(neighbor)
                if j is not None:
                    yield j

        for root in range(n):
            if disc[root] >= 0:
                continue
            context.raise_if_cancelled()

            disc[root] = low[root] = time
            time += 1
            scc_stack.append(root)
            on_stack[root] = True
            frames: List[Tuple[int, Iterator[int]]] = [(root, successors(root))]

            while frames:
                node, neighbors = frames[-1]
                pushed_child = False
                for w in neighbors:
                    if disc[w] < 0:
                        disc[w] = low[w] = time
                        time += 1
                        scc_stack.append(w)
                        on_stack[w] = True
                        frames.append((w, successors(w)))
                        pushed_child = True
                        break
                    if on_stack[w]:
                        low[node] = min(low[node], disc[w])

                if pushed_child:
                    continue

                frames.pop()
                if frames:
                    parent = frames[-1][0]
                    low[parent] = min(low[parent], low[node])

                if low[node] == disc[node]:
                    while True:
                        w = scc_stack.pop()
                        on_stack[w] = False
                        components[w] = component_id
                        if w == node:
                            break
                    component_id += 1

            context.report_progress((root + 1) / n)

        return components
