"""GraphQL documents sent to the Sourcegraph API.

Variable contracts:
  FILE_TREE_QUERY          repo: String!, path: String!, rev: String!
  FILE_CONTENT_QUERY       repo: String!, path: String!, rev: String!
  FILE_BLAME_QUERY         repo: String!, path: String!, rev: String!, startLine: Int, endLine: Int
  REPOSITORY_LIST_QUERY    first: Int!, query: String, after: String, orderBy: RepositoryOrder
  REPO_INFO_QUERY          name: String!
  REPO_BRANCHES_QUERY      name: String!, first: Int!, query: String, after: String
  REPO_COMPARISON_QUERY    name: String!, base: String!, head: String!, firstCommits: Int!, firstDiffs: Int!
  REPO_LANGUAGES_QUERY     name: String!
  CODE_SEARCH_QUERY        query: String!, version: SearchVersion!
  COMMIT_SEARCH_QUERY      query: String!
  SYMBOL_SEARCH_QUERY      query: String!, cursor: String (nullable, sent explicitly)
  SITE_INFO_QUERY          (none)
  CURRENT_USER_QUERY       (none)
"""

FILE_TREE_QUERY = """
query FileTree($repo: String!, $path: String!, $rev: String!) {
  repository(name: $repo) {
    name
    url
    commit(rev: $rev) {
      oid
      tree(path: $path) {
        url
        entries {
          name
          path
          url
          isDirectory
          isSingleChild
          byteSize
          submodule {
            url
          }
        }
      }
    }
  }
}
"""

FILE_CONTENT_QUERY = """
query FileContent($repo: String!, $path: String!, $rev: String!) {
  repository(name: $repo) {
    name
    url
    commit(rev: $rev) {
      oid
      blob(path: $path) {
        path
        content
        byteSize
        isBinary: binary
        languages
        highlight(disableTimeout: false) {
          aborted
        }
      }
    }
  }
}
"""

FILE_BLAME_QUERY = """
query FileBlame($repo: String!, $path: String!, $rev: String!, $startLine: Int, $endLine: Int) {
  repository(name: $repo) {
    name
    url
    commit(rev: $rev) {
      oid
      blob(path: $path) {
        path
        blame(startLine: $startLine, endLine: $endLine) {
          ranges {
            startLine
            endLine
            author {
              date
              person {
                displayName
                email
              }
            }
            commit {
              oid
              abbreviatedOID
              url
              subject
            }
          }
        }
      }
    }
  }
}
"""

REPOSITORY_LIST_QUERY = """
query RepositoryList($query: String, $first: Int!, $after: String, $orderBy: RepositoryOrder) {
  repositories(query: $query, first: $first, after: $after, orderBy: $orderBy) {
    nodes {
      name
      url
      description
      isPrivate
      isFork
      isArchived
      mirrorInfo {
        cloned
        cloneInProgress
      }
      defaultBranch {
        displayName
      }
      viewerCanAdminister
      updatedAt
    }
    totalCount
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

REPO_INFO_QUERY = """
query RepoInfo($name: String!) {
  repository(name: $name) {
    name
    description
    url
    isPrivate
    isFork
    isArchived
    viewerCanAdminister
    diskUsage
    mirrorInfo {
      cloned
      cloneInProgress
      cloneProgress
    }
    defaultBranch {
      displayName
    }
    updatedAt
  }
}
"""

REPO_BRANCHES_QUERY = """
query RepoBranches($name: String!, $first: Int!, $query: String, $after: String) {
  repository(name: $name) {
    name
    url
    defaultBranch {
      displayName
    }
    branches(first: $first, query: $query, after: $after, orderBy: AUTHORED_OR_COMMITTED_AT) {
      nodes {
        name
        displayName
        abbrevName
        url
        target {
          oid
          abbreviatedOID
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

REPO_COMPARISON_QUERY = """
query RepoComparison($name: String!, $base: String!, $head: String!, $firstCommits: Int!, $firstDiffs: Int!) {
  repository(name: $name) {
    name
    comparison(base: $base, head: $head) {
      commits(first: $firstCommits) {
        nodes {
          oid
          abbreviatedOID
          subject
          url
          author {
            person {
              displayName
              name
              email
            }
            date
          }
        }
        totalCount
      }
      fileDiffs(first: $firstDiffs) {
        nodes {
          oldPath
          newPath
          stat {
            added
            changed
            deleted
          }
          hunks {
            oldRange {
              startLine
              lines
            }
            newRange {
              startLine
              lines
            }
            body
          }
        }
        totalCount
      }
    }
  }
}
"""

REPO_LANGUAGES_QUERY = """
query RepoLanguages($name: String!) {
  repository(name: $name) {
    name
    languageStatistics {
      name
      displayName
      color
      totalBytes
      totalLines
    }
  }
}
"""

CODE_SEARCH_QUERY = """
query CodeSearch($query: String!, $version: SearchVersion!) {
  search(query: $query, version: $version) {
    results {
      matchCount
      approximateResultCount
      limitHit
      dynamicFilters {
        value
        label
        count
        kind
      }
      results {
        __typename
        ... on FileMatch {
          repository {
            name
            url
          }
          file {
            path
            url
          }
          lineMatches {
            lineNumber
            preview
            offsetAndLengths
          }
        }
        ... on Repository {
          name
          url
          description
        }
        ... on CommitSearchResult {
          commit {
            repository {
              name
              url
            }
            oid
            abbreviatedOID
            url
            subject
          }
          messagePreview {
            value
          }
        }
      }
      cloning {
        name
      }
      timedout {
        name
      }
      missing {
        name
        url
      }
    }
  }
}
"""

COMMIT_SEARCH_QUERY = """
query CommitSearch($query: String!) {
  search(query: $query, version: V3) {
    results {
      results {
        __typename
        ... on CommitSearchResult {
          commit {
            repository {
              name
              url
            }
            oid
            abbreviatedOID
            url
            subject
            body
            author {
              person {
                displayName
                email
              }
              date
            }
          }
          messagePreview {
            value
          }
          diffPreview {
            value
          }
        }
      }
      matchCount
      limitHit
    }
  }
}
"""

SYMBOL_SEARCH_QUERY = """
query SymbolSearch($query: String!, $cursor: String) {
  search(query: $query, version: V3, after: $cursor) {
    results {
      results {
        __typename
        ... on SymbolSearchResult {
          symbol {
            name
            kind
            language
            containerName
            url
            location {
              resource {
                repository {
                  name
                  url
                }
                path
              }
              range {
                start {
                  line
                  character
                }
              }
            }
          }
        }
      }
      matchCount
      limitHit
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

SITE_INFO_QUERY = """
query SiteInfo {
  site {
    productVersion
    buildVersion
    hasCodeIntelligence
  }
  currentUser {
    username
    email
    displayName
    organizations {
      nodes {
        name
        displayName
      }
    }
  }
}
"""

CURRENT_USER_QUERY = """
query CurrentUserInfo {
  currentUser {
    username
    email
    displayName
    organizations {
      nodes {
        name
        displayName
      }
    }
  }
}
"""
