"""
Plotting utilities for clustering results.

This module draws a fitted dendrogram with matplotlib. The clustering core
has no dependency on it; all drawing options live in :class:`DendrogramStyle`.
"""
import matplotlib.pyplot as plt
import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, TYPE_CHECKING
from scipy.cluster.hierarchy import dendrogram

if TYPE_CHECKING:
    from .clusterer import Dendrogram

_DPI = 100


@dataclass(frozen=True)
class DendrogramStyle:
    """
    Drawing options for :func:`plot_dendrogram`.

    Attributes
    ----------
    width, height : int
        Figure size in pixels.
    show_nodes : bool
        Draw a marker at every join and leaf.
    node_fill, node_stroke : Optional[str]
        Marker face and edge colours. ``None`` means no edge.
    node_radius : float
        Marker radius in pixels.
    branch_stroke : str
        Colour of the tree branches.
    show_leafs : bool
        Label the leaves.
    leaf_label_size : float
        Font size of the leaf labels.
    """
    width: int = 800
    height: int = 500
    show_nodes: bool = True
    node_fill: Optional[str] = 'black'
    node_stroke: Optional[str] = None
    node_radius: float = 1
    branch_stroke: str = '#ccc'
    show_leafs: bool = True
    leaf_label_size: float = 5


def plot_dendrogram(tree: "Dendrogram", style: Optional[DendrogramStyle] = None, labels: Optional[Sequence[str]] = None,
                    mode: str = 'show', fname: str = 'dendrogram') -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot a fitted dendrogram.

    Branch heights are the merge heights of the tree. The drawing itself is
    done by `scipy.cluster.hierarchy.dendrogram <https://docs.scipy.org/doc/scipy/reference/generated/scipy.cluster.hierarchy.dendrogram.html>`_
    on the tree's linkage matrix.

    Parameters
    ----------
    tree : Dendrogram
        Output of :func:`wardclust.perform_clustering`.
    style : Optional[DendrogramStyle], default=None
        Drawing options. Defaults to ``DendrogramStyle()``.
    labels : Optional[Sequence[str]], default=None
        Leaf labels, one per observation. Defaults to the leaf ids.
    mode : str, default='show'
        Display mode for the plot:

        - 'show': Display the plot interactively using matplotlib.pyplot.show()
        - 'save': Save the plot to a PNG file without displaying it
        - 'none': Only build the figure and return it

    fname : str, default='dendrogram'
        Base filename for saving the plot (without extension). Only used when
        mode='save'. The file will be saved as '{fname}.png'.

    Returns
    -------
    Tuple[plt.Figure, plt.Axes]
        The figure and axes holding the plot.
    """
    if mode not in ('show', 'save', 'none'):
        raise ValueError(f"Unknown mode: {mode}. Use 'show', 'save' or 'none'.")

    params = style if style is not None else DendrogramStyle()
    n = tree.n_observations

    if labels is None:
        labels = [str(leaf.id) for leaf in tree.levels[0]]
    elif len(labels) != n:
        raise ValueError(f"Expected {n} labels, got {len(labels)}")

    fig, ax = plt.subplots(figsize=(params.width / _DPI, params.height / _DPI), dpi=_DPI)

    if n > 1:
        result = dendrogram(tree.to_linkage_matrix(), ax=ax, labels=list(labels), no_labels=not params.show_leafs,
                            leaf_font_size=params.leaf_label_size, leaf_rotation=90,
                            link_color_func=lambda k: params.branch_stroke)
        # scipy places leaves at x = 5, 15, 25, ...
        node_x = [5.0 + 10.0 * i for i in range(n)] + [(ic[1] + ic[2]) / 2.0 for ic in result['icoord']]
        node_y = [0.0] * n + [dc[1] for dc in result['dcoord']]
    else:
        ax.set_xticks([5.0])
        ax.set_xticklabels(list(labels) if params.show_leafs else [''], fontsize=params.leaf_label_size, rotation=90)
        ax.set_xlim(0, 10)
        node_x, node_y = [5.0], [0.0]

    if params.show_nodes:
        ax.scatter(node_x, node_y, s=(2 * params.node_radius) ** 2, c=params.node_fill,
                   edgecolors=params.node_stroke if params.node_stroke is not None else 'none', zorder=3)

    ax.set_ylabel('Merge height')
    ax.set_ylim(bottom=0, top=max(np.max(node_y), 1e-12) * 1.05)
    fig.tight_layout()

    if mode == 'show':
        plt.show()
    elif mode == 'save':
        fig.savefig('{0}.png'.format(fname))

    return fig, ax
