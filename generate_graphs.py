import matplotlib.pyplot as plt
from simulator import DemandPagingSimulator
from workload import generate_workload

process_counts = [50, 100, 200, 300, 400, 500]
search_counts = [10, 100]
results = {}

print("Running simulations...")
for num_searches in search_counts:
    results[num_searches] = {}
    for num_processes in process_counts:
        workload = generate_workload(num_processes, num_searches, seed=num_processes)
        simulator = DemandPagingSimulator(workload)
        stats = simulator.run()
        results[num_searches][num_processes] = {
            'page_faults': stats.page_faults,
            'swap_pairs': stats.swap_pairs,
            'min_active_processes': stats.min_active_processes
        }

fig, axes = plt.subplots(1, 3, figsize=(15, 5))
fig.suptitle('Demand Paging under Increasing Multiprogramming', fontsize=14, fontweight='bold')

metrics = ['page_faults', 'swap_pairs', 'min_active_processes']
titles = ['Page Faults', 'Swaps (out/in pairs)', 'Degree of Multiprogramming']
labels = [f'{n} searches/process' for n in search_counts]

legend_handles = None

for idx, (metric, title) in enumerate(zip(metrics, titles)):
    ax = axes[idx]
    x = range(len(process_counts))
    width = 0.35
    bars = []
    for offset, num_searches in zip((-width/2, width/2), search_counts):
        data = [results[num_searches][n][metric] for n in process_counts]
        group = ax.bar([i + offset for i in x], data, width)
        for bar in group:
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width()/2., height,
                    f'{int(height)}', ha='center', va='bottom', fontsize=8)
        bars.append(group)

    if idx == 0:
        legend_handles = [group[0] for group in bars]

    ax.set_title(title)
    ax.set_xlabel('Processes')
    ax.set_xticks(x)
    ax.set_xticklabels(process_counts)
    ax.grid(axis='y', alpha=0.3)

fig.legend(legend_handles, labels, loc='lower center', ncol=2, frameon=True)

plt.tight_layout()
plt.subplots_adjust(bottom=0.15)
plt.savefig('multiprogramming_comparison.png', dpi=300, bbox_inches='tight')
print("\nGraph saved as 'multiprogramming_comparison.png'")
plt.show()
