import numpy as np
from wardclust import perform_clustering, create_cluster_list, compare_with_reference, plot_dendrogram, DendrogramStyle


def main():
    rng = np.random.default_rng(0)
    centres = np.array([[0.0, 0.0], [6.0, 0.0], [3.0, 5.0]])
    data = np.concatenate([centre + rng.normal(scale=0.6, size=(8, 2)) for centre in centres])

    tree = perform_clustering(data)

    for each_cluster in create_cluster_list(tree, data, 3):
        print(f"Cluster {each_cluster.cluster_id}: {each_cluster.number_of_members} members, "
              f"representative {each_cluster.best_representative_member}, height {each_cluster.height:.3f}")

    check = compare_with_reference(data)
    print(f"Matches brute-force Ward: {check['same_merges'] and check['same_heights']}")

    plot_dendrogram(tree, style=DendrogramStyle(node_radius=2, leaf_label_size=8))

if __name__ == "__main__":
    main()
