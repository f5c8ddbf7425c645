'''A few pure-python statistical tools to avoid the need to install scipy. '''
from math import log


def expected_counts(contingencyTable):
    ''' Expected cell counts of an m x n contingency table under independence
        of the row and column criteria: rowSum[i] * colSum[j] / N.
    '''
    if len(set(map(len, contingencyTable))) != 1:
        raise ValueError('Not all rows have the same length')
    n = len(contingencyTable[0])
    rowSums = [sum(row) for row in contingencyTable]
    colSums = [sum(row[col] for row in contingencyTable) for col in range(n)]
    N = sum(rowSums)
    if N == 0:
        raise ValueError('Contingency table sums to zero')
    return [[rowSum * colSum / N for colSum in colSums] for rowSum in rowSums]


def g_statistic(contingencyTable):
    """ Log-likelihood ratio (G-test) statistic for independence of the row
        and column criteria of an m x n contingency table of counts:

            G = 2 * sum(O * ln(O / E))

        where E is the expected count of each cell (see expected_counts).
        Cells with an observed count of zero contribute zero (the limit of
        x*ln(x) as x -> 0). Only the statistic is returned, no p-value.
    """
    # scipy equivalent:  scipy.stats.chi2_contingency(contingencyTable, lambda_="log-likelihood", correction=False)[0]
    if len(contingencyTable) == 0:
        raise ValueError('Empty contingency table')
    if any(x < 0 for row in contingencyTable for x in row):
        raise ValueError('Some table entry is negative')

    expect = expected_counts(contingencyTable)
    total = 0.0
    for row, expRow in zip(contingencyTable, expect):
        for obs, exp in zip(row, expRow):
            if obs > 0:
                total += obs * log(obs / exp)
    return 2 * total
